from concurrent.futures import ThreadPoolExecutor

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="xtenant")

def submit_job(fn, *args, **kwargs):
    """Run background work. Returns Future."""
    return _executor.submit(fn, *args, **kwargs)
