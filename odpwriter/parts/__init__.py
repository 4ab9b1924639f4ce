"""
Built-in part writers for OpenDocument Presentation packages.

Execution order (see odpwriter.registry.BUILTIN_PART_WRITERS):
    mimetype:       mimetype (first entry, stored)
    content:        content.xml; registers charts in the accumulator
    meta:           meta.xml
    settings:       settings.xml
    styles:         styles.xml
    pictures:       Pictures/*, Media/* from the drawing registry
    objects_chart:  Object N/content.xml for every registered chart
    thumbnail:      Thumbnails/thumbnail.png
    manifest:       META-INF/manifest.xml listing every entry written

Writers are registered from the static table in the registry, not by
scanning this package. No explicit imports needed here.
"""

__all__ = []
