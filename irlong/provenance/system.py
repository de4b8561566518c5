"""Identify system information, used to size external program threads.
"""
import multiprocessing

import psutil

def physical_cores():
    """Number of physical CPU cores on the current machine.

    Falls back to the logical CPU count when the physical count is unavailable.
    """
    cores = psutil.cpu_count(logical=False)
    if not cores:
        cores = multiprocessing.cpu_count()
    return max(int(cores), 1)

def resolve_threads(threads):
    """Resolve a requested thread count, 0 meaning every physical core.
    """
    threads = int(threads)
    if threads == 0:
        return physical_cores()
    return threads

def machine_info():
    """Retrieve core and memory information for the current machine.
    """
    BYTES_IN_GIG = 1073741824.0
    free_bytes = psutil.virtual_memory().total
    return {"memory": float("%.1f" % (free_bytes / BYTES_IN_GIG)), "cores": physical_cores()}
