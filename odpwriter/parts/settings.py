"""
Part writer: settings

Writes settings.xml with the view settings derived from the slide size,
so readers open the document showing the full slide.
"""

from typing import List

from odpwriter.base import PartWriter
from odpwriter.models import px_to_cm
from odpwriter.parts.xml_utils import ODF_VERSION, element, sub, to_bytes


def _hundredths_mm(px: int) -> str:
    return str(int(round(px_to_cm(px) * 1000)))


class SettingsWriter(PartWriter):
    """Serialize view settings to settings.xml."""

    name = "settings"
    order = 30
    description = "View settings (settings.xml)"

    requires: List[str] = []
    parts: List[str] = ["settings.xml"]

    def render(self, archive, presentation, drawings, charts):
        layout = presentation.layout

        root = element("office:document-settings", {"office:version": ODF_VERSION})
        settings = sub(root, "office:settings")
        view = sub(settings, "config:config-item-set", {"config:name": "ooo:view-settings"})
        for item, value in (
            ("VisibleAreaTop", "0"),
            ("VisibleAreaLeft", "0"),
            ("VisibleAreaWidth", _hundredths_mm(layout.width)),
            ("VisibleAreaHeight", _hundredths_mm(layout.height)),
        ):
            sub(view, "config:config-item", {"config:name": item, "config:type": "int"}, text=value)

        conf = sub(settings, "config:config-item-set", {"config:name": "ooo:configuration-settings"})
        sub(conf, "config:config-item", {"config:name": "IsPrintPageName", "config:type": "boolean"},
            text="false")

        archive.write_entry("settings.xml", to_bytes(root))
        return archive
