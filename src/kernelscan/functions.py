"""
Tracked Logging Functions
=========================

The fixed set of kernel logging functions and macros whose calls are
extracted, and the matcher used by the scanner to recognize them.

Families
--------
- printk and friends: printk, vprintk, printk_once, early_printk, ...
- pr_*: pr_err, pr_warn, pr_info, pr_debug and their _once variants
- dev_*: dev_err, dev_warn, dev_dbg, _once and _ratelimited variants
- ACPI_*: ACPICA error, warning and debug print macros
- misc: printf, dbg, DEBUG
"""

from typing import Iterable, Optional


TRACKED_FUNCTIONS: tuple[str, ...] = (
    # printk family
    "printk",
    "printf",
    "early_printk",
    "vprintk_emit",
    "vprintk",
    "printk_emit",
    "printk_once",
    "printk_deferred",
    "printk_deferred_once",

    # pr_* helpers
    "pr_emerg",
    "pr_alert",
    "pr_crit",
    "pr_err",
    "pr_warning",
    "pr_warn",
    "pr_notice",
    "pr_info",
    "pr_cont",
    "pr_devel",
    "pr_debug",
    "pr_emerg_once",
    "pr_alert_once",
    "pr_crit_once",
    "pr_err_once",
    "pr_warning_once",
    "pr_warn_once",
    "pr_notice_once",
    "pr_info_once",
    "pr_cont_once",
    "pr_devel_once",
    "pr_debug_once",
    "dynamic_pr_debug",

    # dev_* helpers
    "dev_vprintk_emit",
    "dev_printk_emit",
    "dev_printk",
    "dev_emerg",
    "dev_alert",
    "dev_crit",
    "dev_err",
    "dev_warn",
    "dev_dbg",
    "dev_notice",
    "dev_level_once",
    "dev_emerg_once",
    "dev_alert_once",
    "dev_crit_once",
    "dev_err_once",
    "dev_warn_once",
    "dev_notice_once",
    "dev_info_once",
    "dev_dbg_once",
    "dev_level_ratelimited",
    "dev_emerg_ratelimited",
    "dev_alert_ratelimited",
    "dev_crit_ratelimited",
    "dev_err_ratelimited",
    "dev_warn_ratelimited",
    "dev_notice_ratelimited",
    "dev_info_ratelimited",

    # Miscellaneous
    "dbg",

    # ACPICA
    "ACPI_ERROR",
    "ACPI_INFO",
    "ACPI_WARNING",
    "ACPI_EXCEPTION",
    "ACPI_BIOS_WARNING",
    "ACPI_BIOS_ERROR",
    "ACPI_ERROR_METHOD",
    "ACPI_DEBUG_PRINT",
    "ACPI_DEBUG_PRINT_RAW",
    "DEBUG",
)


class FunctionNameMatcher:
    """
    Constant-time membership test for tracked function names.

    Example:
        matcher = FunctionNameMatcher()
        matcher.is_tracked("dev_err")    # True
        matcher.is_tracked("memcpy")     # False

    Attributes:
        names: The frozen set of tracked names
    """

    def __init__(
        self,
        names: Iterable[str] = TRACKED_FUNCTIONS,
        extra: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            names: Base set of names (defaults to TRACKED_FUNCTIONS)
            extra: Additional names to track on top of the base set
        """
        self.names = frozenset(names) | frozenset(extra or ())

    def is_tracked(self, name: str) -> bool:
        """Return True if name is a tracked logging function."""
        return name in self.names

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)
