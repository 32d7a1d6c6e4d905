"""Tests for lazily loaded values"""
import pytest

from gitscope.models.lazy import Lazy, LoadState


class TestLazy:
    """Test the Unloaded to Loaded transition."""

    def test_loader_runs_once(self):
        """Test the loader runs on first access only."""
        calls = []

        def loader():
            calls.append(1)
            return ["value"]

        lazy = Lazy(loader)
        assert lazy.state is LoadState.UNLOADED
        first = lazy.get()
        assert lazy.get() is first
        assert lazy.is_loaded
        assert len(calls) == 1

    def test_loaded(self):
        """Test a value created loaded never runs a loader."""
        lazy = Lazy.loaded(42)
        assert lazy.state is LoadState.LOADED
        assert lazy.get() == 42

    def test_failed_load_stays_unloaded(self):
        """Test a raising loader leaves the value unloaded for a retry."""
        attempts = []

        def loader():
            attempts.append(1)
            if len(attempts) == 1:
                raise OSError("transient")
            return "ok"

        lazy = Lazy(loader)
        with pytest.raises(OSError):
            lazy.get()
        assert not lazy.is_loaded
        assert lazy.get() == "ok"
        assert len(attempts) == 2

    def test_no_loader(self):
        """Test reading an unloaded value without a loader raises."""
        with pytest.raises(RuntimeError):
            Lazy().get()

    def test_repr(self):
        """Test the repr shows the state."""
        assert repr(Lazy(lambda: 1)) == "Lazy(unloaded)"
        assert repr(Lazy.loaded(1)) == "Lazy(loaded=1)"
