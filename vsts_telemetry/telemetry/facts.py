"""
Platform Facts

Host, OS and runtime facts reported with every telemetry context.

Most facts are cheap reads recomputed on every access. The two slow ones,
the host name and the Linux distribution, are resolved once per
PlatformFacts instance and cached, failures included.
"""

import getpass
import glob
import locale
import logging
import platform
import socket
import subprocess
import threading
from collections.abc import Callable, Iterable

from babel import Locale, UnknownLocaleError

from ..config import Settings, settings
from .constants import LINUX_OS_NAME, UNKNOWN

logger = logging.getLogger(__name__)

SYS_PROP_OS_NAME = "os.name"
SYS_PROP_OS_VERSION = "os.version"
SYS_PROP_OS_ARCH = "os.arch"
SYS_PROP_USER_NAME = "user.name"
SYS_PROP_RUNTIME_NAME = "runtime.name"
SYS_PROP_RUNTIME_VERSION = "runtime.version"

LINUX_DISTRIBUTION_NAME = "NAME="
LINUX_DISTRIBUTION_VERSION = "VERSION="

SystemPropertyReader = Callable[[str], str | None]
ReleaseReader = Callable[[], list[str] | None]


def _os_name() -> str:
    system = platform.system()
    if system == "Windows":
        return f"Windows {platform.release()}".strip()
    if system == "Darwin":
        return "Mac OS X"
    return system


def _os_version() -> str:
    system = platform.system()
    if system == "Windows":
        return platform.version()
    if system == "Darwin":
        return platform.mac_ver()[0]
    return platform.release()


_SYSTEM_PROPERTIES: dict[str, Callable[[], str]] = {
    SYS_PROP_OS_NAME: _os_name,
    SYS_PROP_OS_VERSION: _os_version,
    SYS_PROP_OS_ARCH: platform.machine,
    SYS_PROP_USER_NAME: getpass.getuser,
    SYS_PROP_RUNTIME_NAME: platform.python_implementation,
    SYS_PROP_RUNTIME_VERSION: platform.python_version,
}


def read_system_property(name: str) -> str | None:
    """
    Read a system property of the running process.

    Args:
        name: One of the ``SYS_PROP_*`` names

    Returns:
        The value, or None when the property is unknown, empty or cannot be read
    """
    reader = _SYSTEM_PROPERTIES.get(name)
    if reader is None:
        return None

    try:
        value = reader()
    except Exception as e:
        logger.warning(f"Could not read system property {name}: {e}")
        return None

    return value or None


def read_locale_name() -> str | None:
    """
    Display name of the process locale, e.g. ``English (United States)``.

    Returns:
        The display name, the raw language tag when it has no locale data,
        or None when the locale is unset
    """
    try:
        language, _ = locale.getlocale()
    except ValueError as e:
        logger.warning(f"Could not determine locale: {e}")
        return None
    if not language:
        return None

    try:
        return Locale.parse(language).display_name or language
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"No display name for locale {language}: {e}")
        return language


def parse_release_lines(lines: Iterable[str]) -> tuple[str | None, str | None]:
    """
    Extract the distribution name and version from OS release text.

    Lines starting with ``NAME=`` and ``VERSION=`` are matched literally and
    double quotes are stripped from the value. When several files define
    the same key the last one wins.

    Returns:
        (name, version), each None when no matching line was found
    """
    name = None
    version = None
    for line in lines:
        if line.startswith(LINUX_DISTRIBUTION_NAME):
            name = line[len(LINUX_DISTRIBUTION_NAME) :].replace('"', "")
        if line.startswith(LINUX_DISTRIBUTION_VERSION):
            version = line[len(LINUX_DISTRIBUTION_VERSION) :].replace('"', "")
    return name, version


def format_distribution(name: str | None, version: str | None) -> str:
    """Format a distribution as ``<name> - <version>``, defaulting missing halves to Unknown."""
    return f"{UNKNOWN if name is None else name} - {UNKNOWN if version is None else version}"


def read_release_files(pattern: str) -> list[str] | None:
    """
    Read every file matching ``pattern`` in glob order.

    Returns:
        Concatenated lines, or None when no file could be read
    """
    lines: list[str] = []
    read_any = False
    for path in sorted(glob.glob(pattern)):
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                lines.extend(f.read().splitlines())
            read_any = True
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")

    return lines if read_any else None


def run_release_command(command: str, timeout: float | None = None) -> list[str] | None:
    """
    Run ``command`` through /bin/sh and return its stdout lines.

    The output is captured in full and the child is reaped on every path,
    including timeouts. Output is parsed even on a non-zero exit status,
    since ``cat`` still prints the files it could open.

    Returns:
        stdout lines, or None when the command could not be run
    """
    try:
        result = subprocess.run(
            ["/bin/sh", "-c", command],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f"Could not find Linux distribution due to error: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"Release command exited with {result.returncode}: {result.stderr.strip()}")
    return result.stdout.splitlines()


class PlatformFacts:
    """Source of host, OS and runtime facts.

    Every accessor degrades to a default ("" or "Unknown") instead of raising.
    """

    def __init__(
        self,
        system_properties: SystemPropertyReader | None = None,
        hostname_resolver: Callable[[], str] | None = None,
        release_reader: ReleaseReader | None = None,
        locale_reader: Callable[[], str | None] | None = None,
        app_settings: Settings | None = None,
    ):
        """
        Initialize the fact source.

        Args:
            system_properties: Property lookup returning None for unavailable values
            hostname_resolver: Returns the fully qualified local host name, may raise OSError
            release_reader: Returns OS release lines, or None when unavailable
            locale_reader: Returns the locale name, or None when unset
            app_settings: Settings for the release file/command lookup
        """
        self._settings = app_settings or settings
        self._system_properties = system_properties or read_system_property
        self._hostname_resolver = hostname_resolver or socket.getfqdn
        self._release_reader = release_reader or self._read_release_lines
        self._locale_reader = locale_reader or read_locale_name

        self._lock = threading.Lock()
        self._hostname: str | None = None
        self._linux_distribution: str | None = None

    # ----- System properties -----

    def system_property(self, name: str) -> str | None:
        """Look up a system property; None means unavailable."""
        try:
            return self._system_properties(name)
        except Exception as e:
            logger.warning(f"System property lookup failed for {name}: {e}")
            return None

    def _property_or_empty(self, name: str) -> str:
        return self.system_property(name) or ""

    @property
    def platform_name(self) -> str:
        return self._property_or_empty(SYS_PROP_OS_NAME)

    @property
    def platform_version(self) -> str:
        return self._property_or_empty(SYS_PROP_OS_VERSION)

    @property
    def platform_short_name(self) -> str:
        """First whitespace-delimited token of the OS name."""
        parts = self.platform_name.split(None, 1)
        return parts[0] if parts else ""

    @property
    def platform_major_version(self) -> str:
        return self.platform_version.partition(".")[0]

    @property
    def platform_minor_version(self) -> str:
        return self.platform_version.partition(".")[2]

    @property
    def is_linux(self) -> bool:
        return self.platform_name.lower() == LINUX_OS_NAME.lower()

    @property
    def platform_full_name(self) -> str:
        """OS name with its version, or with the distribution on Linux."""
        detail = self.linux_distribution if self.is_linux else self.platform_version
        return f"{self.platform_name} ({detail})"

    @property
    def processor_architecture(self) -> str:
        return self._property_or_empty(SYS_PROP_OS_ARCH).upper()

    @property
    def user_name(self) -> str:
        return self._property_or_empty(SYS_PROP_USER_NAME)

    @property
    def runtime_name(self) -> str:
        return self._property_or_empty(SYS_PROP_RUNTIME_NAME)

    @property
    def runtime_version(self) -> str:
        return self._property_or_empty(SYS_PROP_RUNTIME_VERSION)

    @property
    def locale_name(self) -> str:
        try:
            return self._locale_reader() or ""
        except Exception as e:
            logger.warning(f"Locale lookup failed: {e}")
            return ""

    # ----- Cached lookups -----

    @property
    def hostname(self) -> str:
        """Local host name, resolved once; "Unknown" when resolution fails."""
        if self._hostname is None:
            with self._lock:
                if self._hostname is None:
                    self._hostname = self._resolve_hostname()
        return self._hostname

    def _resolve_hostname(self) -> str:
        # this lookup can take several seconds on some hosts
        try:
            name = self._hostname_resolver()
        except Exception as e:
            logger.warning(f"Could not resolve local host name: {e}")
            return UNKNOWN
        return name or UNKNOWN

    @property
    def linux_distribution(self) -> str:
        """``<name> - <version>`` from the OS release files, resolved once."""
        if self._linux_distribution is None:
            with self._lock:
                if self._linux_distribution is None:
                    self._linux_distribution = self._find_linux_distribution()
        return self._linux_distribution

    def _find_linux_distribution(self) -> str:
        try:
            lines = self._release_reader()
        except Exception as e:
            logger.warning(f"Could not find Linux distribution due to error: {e}")
            lines = None

        name, version = parse_release_lines(lines or [])
        distribution = format_distribution(name, version)
        logger.debug(f"Resolved Linux distribution: {distribution}")
        return distribution

    def _read_release_lines(self) -> list[str] | None:
        lines = read_release_files(self._settings.release_files_glob)
        if lines is not None:
            return lines

        logger.debug("Release files not readable, falling back to the release command")
        return run_release_command(
            self._settings.release_command, self._settings.release_command_timeout
        )
