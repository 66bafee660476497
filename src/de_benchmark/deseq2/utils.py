from functools import lru_cache


@lru_cache(maxsize=1)
def _prep_deseq2():
    """Lazily prepare the DESeq2 runtime.

    Returns:
        Tuple[Any, Any]: ``(r_env, DESeq2_pkg)``.
    """
    from bioc2ri.lazy_r_env import get_r_environment
    r = get_r_environment()
    deseq2_pkg = r.lazy_import_r_packages("DESeq2")
    return r, deseq2_pkg
