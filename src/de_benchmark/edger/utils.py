from functools import lru_cache


@lru_cache(maxsize=1)
def _prep_edger():
    """Lazily prepare the edgeR runtime.

    Returns:
        Tuple[Any, Any]: A tuple ``(r_env, edgeR_pkg)`` where
        ``r_env`` is the lazy rpy2 environment from ``bioc2ri``,
        and ``edgeR_pkg`` is the imported R ``edgeR`` package (lazy import).

    Notes:
        The result is cached (LRU) to avoid repeated imports.
    """
    from bioc2ri.lazy_r_env import get_r_environment
    r = get_r_environment()
    edger_pkg = r.lazy_import_r_packages("edgeR")
    return r, edger_pkg
