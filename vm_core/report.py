def to_signed_byte(value):
    """Interprets an unsigned byte (0-255) as a signed 8-bit integer."""
    return value - 256 if value > 127 else value


def format_translation(result, signed=True):
    value = to_signed_byte(result.value) if signed else result.value
    return (f"Virtual address: {result.virtual_address} "
            f"Physical address: {result.physical_address} Value: {value}")


def format_summary(stats):
    return f"Page Fault Rate: {stats.page_fault_rate:f}, TLB Hit Rate: {stats.tlb_hit_rate:f}"
