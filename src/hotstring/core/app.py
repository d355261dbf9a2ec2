"""Hotstring application composition root."""

from __future__ import annotations

from dataclasses import dataclass

from hotstring.config import HotstringSettings
from hotstring.core.events import EventBus, EventBusObserver
from hotstring.host import MemoryTextHost, TextHost
from hotstring.logging import get_logger
from hotstring.services.hotstring_engine import HotstringEngine
from hotstring.services.importer import ImportResult


@dataclass(slots=True)
class HotstringContext:
    settings: HotstringSettings
    events: EventBus
    host: TextHost
    engine: HotstringEngine

    def load_sources(self) -> ImportResult:
        """Register the configured defaults and import every configured script."""
        logger = get_logger("bootstrap")
        report = ImportResult()
        for item in self.settings.engine.defaults:
            self.engine.register(item["definition"], item["replacement"])
            report.added += 1
        for path in self.settings.engine.scripts:
            result = self.engine.import_script(path.read_text(encoding="utf-8"))
            logger.info("Loaded {}: {} hotstrings", path, result.added)
            report.added += result.added
            report.errors.extend(result.errors)
        return report


def build_context(settings: HotstringSettings, host: TextHost | None = None) -> HotstringContext:
    events = EventBus()
    host = host if host is not None else MemoryTextHost()
    engine = HotstringEngine(settings.engine, host, EventBusObserver(events))
    host.subscribe(engine.handle_change)

    logger = get_logger("bootstrap")
    logger.info("Hotstring context ready")

    return HotstringContext(settings=settings, events=events, host=host, engine=engine)
