"""
Tests for the scope stack.
"""

import pytest

from liquidish.transformer.scope import ScopeStack


class TestScopeStack:

    def setup_method(self):
        self.stack = ScopeStack(base_path="/root/page.liquid")

    def test_empty_stack(self):
        assert len(self.stack) == 0
        assert self.stack.peek() is None
        assert self.stack.pop() == {}
        assert self.stack.flatten() == {}

    def test_push_returns_the_same_frame(self):
        frame = {"a": 1}
        assert self.stack.push(frame) is frame
        assert self.stack.peek() is frame

    def test_later_frames_win(self):
        self.stack.push({"a": 1, "b": 1})
        self.stack.push({"b": 2})

        assert self.stack.flatten() == {"a": 1, "b": 2}

        self.stack.pop()
        assert self.stack.flatten() == {"a": 1, "b": 1}

    def test_current_path_falls_back_to_base(self):
        assert self.stack.current_path() == "/root/page.liquid"
        assert self.stack.is_at_root()

    def test_current_path_from_innermost_frame(self):
        self.stack.push({"path": "/root/component.liquid"})
        assert self.stack.current_path() == "/root/component.liquid"
        assert not self.stack.is_at_root()

        # Loop frames carry no path and keep the component path
        self.stack.push({"item": 1})
        assert self.stack.current_path() == "/root/component.liquid"

    def test_pushed_pops_on_exit(self):
        with self.stack.pushed({"x": 1}):
            assert self.stack.flatten() == {"x": 1}
        assert len(self.stack) == 0

    def test_pushed_pops_on_error(self):
        self.stack.push({"outer": True})

        with pytest.raises(RuntimeError):
            with self.stack.pushed({"x": 1}):
                self.stack.push({"leaked": True})
                raise RuntimeError("boom")

        assert self.stack.flatten() == {"outer": True}
