"""Configuration handling for gitscope"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Configuration for gitscope with validation."""

    # Command execution
    git_binary: str = "git"
    timeout: Optional[float] = None  # Seconds before a git process is killed (None = wait forever)
    quote_paths: bool = False  # Default for the per-call core.quotePath setting

    # Revision whose .gitmodules describes the submodules
    submodule_ref: str = "HEAD"

    # Side labels used when parsing conflict markers
    ours_label: str = "ours"
    theirs_label: str = "theirs"
    common_label: str = "common"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_git_binary()
        self._validate_timeout()
        self._validate_submodule_ref()
        self._validate_labels()

    def _validate_git_binary(self):
        """Validate git_binary is not empty."""
        if not self.git_binary or not self.git_binary.strip():
            raise ValueError("git_binary cannot be empty")
        self.git_binary = self.git_binary.strip()

    def _validate_timeout(self):
        """Validate timeout is positive when set."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def _validate_submodule_ref(self):
        """Validate submodule_ref is not empty."""
        if not self.submodule_ref or not self.submodule_ref.strip():
            raise ValueError("submodule_ref cannot be empty")
        self.submodule_ref = self.submodule_ref.strip()

    def _validate_labels(self):
        """Validate conflict side labels are non-empty and distinct."""
        labels = [self.ours_label, self.theirs_label, self.common_label]
        if not all(labels):
            raise ValueError("conflict side labels cannot be empty")
        if len(set(labels)) != len(labels):
            raise ValueError(f"conflict side labels must be distinct, got {labels}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "git_binary": self.git_binary,
            "timeout": self.timeout,
            "quote_paths": self.quote_paths,
            "submodule_ref": self.submodule_ref,
            "ours_label": self.ours_label,
            "theirs_label": self.theirs_label,
            "common_label": self.common_label,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        # Extract only known fields
        known_fields = {
            "git_binary",
            "timeout",
            "quote_paths",
            "submodule_ref",
            "ours_label",
            "theirs_label",
            "common_label",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
