"""Tests for the staged, stoppable request pipeline."""

import pytest

from gridnet.events.pipeline import EventContext, EventPipeline, Stage


class TestStage:
    @pytest.mark.parametrize("name", ["successResponse", "SUCCESS_RESPONSE", "success_response"])
    def test_parse_accepts_wire_and_python_names(self, name):
        assert Stage.parse(name) is Stage.SUCCESS_RESPONSE

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            Stage.parse("afterRequest")


class TestEventContext:
    def test_payload_is_read_only(self):
        ctx = EventContext({"kind": "read"})
        with pytest.raises(TypeError):
            ctx.payload["kind"] = "create"

    def test_payload_is_copied(self):
        source = {"page": 1}
        ctx = EventContext(source)
        source["page"] = 2
        assert ctx["page"] == 1

    def test_nested_payload_is_frozen_copy(self):
        source = {"data": {"contents": [{"name": "a"}]}}
        ctx = EventContext(source)
        contents = ctx["data"]["contents"]

        with pytest.raises(AttributeError):
            contents.clear()
        with pytest.raises(TypeError):
            contents[0]["name"] = "b"
        source["data"]["contents"].append({"name": "c"})

        assert len(ctx["data"]["contents"]) == 1
        assert ctx["data"]["contents"][0]["name"] == "a"

    def test_stop_latches(self):
        ctx = EventContext()
        assert ctx.is_stopped() is False
        ctx.stop()
        ctx.stop()
        assert ctx.stopped is True

    def test_get_default(self):
        assert EventContext().get("missing", 5) == 5


class TestEventPipeline:
    def test_observers_run_in_registration_order(self):
        pipeline = EventPipeline()
        order = []
        pipeline.on(Stage.RESPONSE, lambda ctx: order.append(1))
        pipeline.on("response", lambda ctx: order.append(2))

        pipeline.dispatch(Stage.RESPONSE, {})

        assert order == [1, 2]

    def test_stop_skips_later_observers(self):
        pipeline = EventPipeline()
        later = []
        pipeline.on(Stage.BEFORE_REQUEST, lambda ctx: ctx.stop())
        pipeline.on(Stage.BEFORE_REQUEST, later.append)

        ctx = pipeline.dispatch(Stage.BEFORE_REQUEST, {"kind": "read"})

        assert ctx.stopped is True
        assert later == []

    def test_stopped_context_runs_no_observers(self):
        pipeline = EventPipeline()
        seen = []
        pipeline.on(Stage.SUCCESS_RESPONSE, seen.append)
        ctx = EventContext()
        ctx.stop()

        pipeline.dispatch(Stage.SUCCESS_RESPONSE, ctx)

        assert seen == []

    def test_context_carries_across_stages(self):
        pipeline = EventPipeline()
        seen = []
        pipeline.on(Stage.RESPONSE, seen.append)
        pipeline.on(Stage.FAIL_RESPONSE, seen.append)

        ctx = pipeline.dispatch(Stage.RESPONSE, {"http_status": 200})
        same = pipeline.dispatch(Stage.FAIL_RESPONSE, ctx)

        assert same is ctx
        assert seen == [ctx, ctx]
        assert ctx.stage is Stage.FAIL_RESPONSE

    def test_stages_are_independent(self):
        pipeline = EventPipeline()
        seen = []
        pipeline.on(Stage.ERROR_RESPONSE, seen.append)

        pipeline.dispatch(Stage.SUCCESS_RESPONSE, {})

        assert seen == []

    def test_off_removes_observer(self):
        pipeline = EventPipeline()
        seen = []
        observer = pipeline.on(Stage.RESPONSE, seen.append)
        pipeline.off("response", observer)

        pipeline.dispatch(Stage.RESPONSE)

        assert seen == []
        assert pipeline.observer_count(Stage.RESPONSE) == 0

    def test_off_unknown_observer_raises(self):
        with pytest.raises(ValueError):
            EventPipeline().off(Stage.RESPONSE, lambda ctx: None)

    def test_observer_exception_propagates(self):
        pipeline = EventPipeline()

        def broken(ctx):
            raise RuntimeError("observer failed")

        pipeline.on(Stage.RESPONSE, broken)
        with pytest.raises(RuntimeError):
            pipeline.dispatch(Stage.RESPONSE)

    def test_observer_added_during_dispatch_waits_for_next_one(self):
        pipeline = EventPipeline()
        seen = []

        def register(ctx):
            pipeline.on(Stage.RESPONSE, lambda c: seen.append("late"))

        pipeline.on(Stage.RESPONSE, register)
        pipeline.dispatch(Stage.RESPONSE)
        assert seen == []

        pipeline.dispatch(Stage.RESPONSE)
        assert seen == ["late"]

    def test_clear(self):
        pipeline = EventPipeline()
        pipeline.on(Stage.RESPONSE, lambda ctx: None)
        pipeline.clear()
        assert pipeline.observer_count(Stage.RESPONSE) == 0
