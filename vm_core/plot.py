import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np


def cumulative_rates(results):
    """Returns (accesses, tlb_hit_rate, page_fault_rate) arrays after each translation."""
    tlb_hits = np.array([r.tlb_hit for r in results], dtype=float)
    page_faults = np.array([r.page_fault for r in results], dtype=float)
    accesses = np.arange(1, len(tlb_hits) + 1)
    return accesses, np.cumsum(tlb_hits) / accesses, np.cumsum(page_faults) / accesses


def plot_rates(results, path):
    """Draws cumulative TLB hit rate and page fault rate over the run and saves it to path."""
    accesses, hit_rate, fault_rate = cumulative_rates(results)

    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        if len(accesses):
            ax.plot(accesses, hit_rate, label='TLB hit rate', color='#1f77b4')
            ax.plot(accesses, fault_rate, label='Page fault rate', color='#d62728')
            ax.set_xlim(1, max(2, len(accesses)))
            ax.legend(loc='upper right')
        ax.set_ylim(0, 1.05)
        ax.set_xlabel('Addresses translated')
        ax.set_ylabel('Rate')
        ax.set_title('Address Translation Rates')
        ax.grid(axis='both', color='#cccccc', linestyle='--', linewidth=0.7)
        fig.tight_layout(pad=0.5)
        fig.savefig(path)
    finally:
        plt.close(fig)
