from __future__ import annotations

__all__: list[str] = ["PatchSourceClient", "load_glossary", "load_patch"]

from catalogsync.integrations.patch_source import PatchSourceClient, load_glossary, load_patch
