"""Tests for on_change and register_handler."""

import pytest

from watchfx import on_change, register_handler, resolve_handlers
from watchfx.annotations import WATCHES_ATTR


class TestOnChange:
    def test_records_fields(self):
        @on_change("a", "b")
        def handler(self):
            pass

        assert getattr(handler, WATCHES_ATTR) == [("a", "b")]

    def test_returns_same_function(self):
        def handler(self):
            pass

        assert on_change("a")(handler) is handler

    def test_stacked_keeps_source_order(self):
        @on_change("first")
        @on_change("second", "third")
        def handler(self):
            pass

        assert getattr(handler, WATCHES_ATTR) == [("first",), ("second", "third")]

    def test_requires_a_field(self):
        with pytest.raises(TypeError, match="at least one field"):
            on_change()

    def test_rejects_non_str(self):
        with pytest.raises(TypeError, match="must be str"):
            on_change("a", 3)


class TestRegisterHandler:
    def test_registers_undecorated_method(self):
        class Panel:
            def redraw(self):
                pass

        register_handler(Panel, "redraw", "width", "height")
        (descriptor,) = resolve_handlers(Panel)
        assert descriptor.name == "redraw"
        assert descriptor.fields == ("width", "height")

    def test_appends_after_decorators(self):
        class Panel:
            @on_change("title")
            def redraw(self):
                pass

        register_handler(Panel, "redraw", "width")
        assert [d.fields for d in resolve_handlers(Panel)] == [("title",), ("width",)]

    def test_unknown_method(self):
        class Panel:
            pass

        with pytest.raises(AttributeError, match="does not declare"):
            register_handler(Panel, "redraw", "width")

    def test_inherited_method_is_not_declared(self):
        class Base:
            def redraw(self):
                pass

        class Panel(Base):
            pass

        with pytest.raises(AttributeError):
            register_handler(Panel, "redraw", "width")
