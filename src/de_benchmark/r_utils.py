"""R package dependency management."""

from __future__ import annotations
from typing import Sequence

# Packages already verified during this session
_checked_packages: set = set()

# Bioconductor packages each pipeline needs
METHOD_R_PACKAGES = {
    "edger": ["edgeR"],
    "deseq2": ["DESeq2"],
    "limma": ["limma", "edgeR"],
}


def _import_rpackages():
    try:
        import rpy2.robjects.packages as rpackages
    except ImportError:
        raise ImportError(
            "rpy2 is not installed. Please install it via 'pip install rpy2' "
            "and make sure an R installation is available."
        )
    return rpackages


def r_packages_installed(packages: Sequence[str]) -> bool:
    """
    Check whether R packages are installed, without installing anything.

    Returns False (instead of raising) when rpy2 or R itself is missing,
    so it can be used to decide whether R-backed code paths are usable.

    Args:
        packages: R package names, e.g. ``["edgeR", "limma"]``.

    Returns:
        True if rpy2 loads and every package is installed.
    """
    try:
        import rpy2.robjects.packages as rpackages
    except Exception:
        # rpy2 raises a variety of errors when R cannot be located
        return False
    return all(rpackages.isinstalled(pkg) for pkg in packages)


def ensure_r_dependencies(packages: Sequence[str]) -> None:
    """
    Checks if required R packages are installed.
    If not, attempts to install them using BiocManager via rpy2.

    Args:
        packages: Sequence of R package names to check/install.
            e.g., ["edgeR"], ["limma", "edgeR"]

    Example:
        >>> ensure_r_dependencies(["DESeq2"])
    """
    packages_to_check = [pkg for pkg in packages if pkg not in _checked_packages]
    if not packages_to_check:
        return

    rpackages = _import_rpackages()
    from rpy2.robjects.vectors import StrVector

    missing_pkgs = [pkg for pkg in packages_to_check if not rpackages.isinstalled(pkg)]

    if missing_pkgs:
        print(f"Missing R packages detected: {', '.join(missing_pkgs)}")
        print("Attempting to install via BiocManager...")

        utils = rpackages.importr('utils')
        utils.chooseCRANmirror(ind=1)  # Select first mirror automatically

        if not rpackages.isinstalled("BiocManager"):
            utils.install_packages(StrVector(["BiocManager"]))

        bioc_manager = rpackages.importr("BiocManager")
        bioc_manager.install(StrVector(missing_pkgs), ask=False)

        still_missing = [pkg for pkg in missing_pkgs if not rpackages.isinstalled(pkg)]
        if still_missing:
            raise RuntimeError(
                f"Failed to install R packages: {', '.join(still_missing)}"
            )
        print("R packages installed successfully.")

    _checked_packages.update(packages_to_check)
