from hotstring.config import EngineSettings, HotstringSettings
from hotstring.core.app import build_context
from hotstring.core.events import TOPIC_FIRED
from hotstring.host import type_keys


def test_build_context_loads_defaults_and_scripts(tmp_path):
    script = tmp_path / "main.ahk"
    script.write_text("::sig::Regards\n::::bad\n", encoding="utf-8")
    settings = HotstringSettings(
        engine=EngineSettings(
            defaults=[{"definition": ":*:btw", "replacement": "by the way"}],
            scripts=[script],
        )
    )
    ctx = build_context(settings)
    report = ctx.load_sources()
    assert report.added == 2
    assert len(report.errors) == 1
    assert len(ctx.engine.registry) == 2


def test_fired_events_reach_the_bus():
    ctx = build_context(HotstringSettings())
    fired = []
    ctx.events.subscribe(TOPIC_FIRED, fired.append)
    ctx.engine.register(":*:btw", "by the way")
    type_keys(ctx.engine, ctx.host, "btw")
    assert ctx.host.text == "by the way"
    assert [d.label for d in fired] == [":*:btw"]
