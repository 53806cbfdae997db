"""USD-BRL quote fetching, storage, serving and local polling."""
