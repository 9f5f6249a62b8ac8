"""Translation engine implementations.

Importing this package registers every engine with ``TransInterface.registered``.

Modules:
- DeepTranslation: Deep Translate (RapidAPI) over plain HTTPS, the default engine.
- DeeplTranslation: DeepL through the official SDK.
- GoogleCloudTranslation: Google Cloud Translation API v2.
"""

from core.trans.engines.deep_translate import DeepTranslation
from core.trans.engines.trans_deepl import DeeplTranslation
from core.trans.engines.trans_google_cloud import GoogleCloudTranslation

__all__: list[str] = [
    "DeepTranslation",
    "DeeplTranslation",
    "GoogleCloudTranslation",
]
