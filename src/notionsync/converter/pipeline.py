"""Markdown normalization pipeline.

Runs the stages on one document's raw converter output, in a fixed order:

1. :func:`~notionsync.converter.protect.extract` -- cut out code fences and
   disclosure blocks;
2. :func:`~notionsync.converter.reformat.reformat` -- quotes, paragraph
   breaks, blank runs;
3. :class:`~notionsync.image.AssetLocalizer` -- mirror upload-host images
   (main text and disclosure blocks);
4. :func:`~notionsync.converter.inline_html.normalize_captions` -- top-level
   ``<summary>`` captions;
5. :func:`~notionsync.converter.disclosure.finish_regions` -- disclosure
   blocks;
6. :func:`~notionsync.converter.protect.restore` -- put the regions back.

The text and the region list are threaded explicitly from stage to stage;
nothing is shared between documents.
"""

from __future__ import annotations

import dataclasses

from notionsync.config import SyncConfig
from notionsync.image import AssetLocalizer
from notionsync.models import Document, NormalizedBody, RegionKind, SyncWarning
from notionsync.observability import get_logger

from .disclosure import finish_regions
from .inline_html import normalize_captions
from .protect import extract, find_unresolved_tokens, restore
from .reformat import reformat

log = get_logger("notionsync.pipeline")


def normalize_markdown(
    document: Document,
    config: SyncConfig,
    localizer: AssetLocalizer | None = None,
) -> NormalizedBody:
    """Normalize the body of *document*.

    Parameters
    ----------
    document:
        The document whose ``body`` is normalized.
    config:
        Run configuration (line-break style).
    localizer:
        Asset localizer; when ``None`` image URLs are left untouched.

    Returns
    -------
    NormalizedBody
        Final markdown, localized assets keyed by remote URL, and warnings.
    """
    result = NormalizedBody(text="")

    text, regions = extract(document.body)
    text = reformat(text, config.line_break_style)

    if localizer is not None:
        disclosure_ids = [i for i, r in enumerate(regions) if r.kind is RegionKind.DISCLOSURE]
        localized = localizer.localize(
            text,
            document,
            extra_texts=[regions[i].text for i in disclosure_ids],
        )
        text = localized.text
        for i, new_text in zip(disclosure_ids, localized.extra_texts):
            regions[i] = dataclasses.replace(regions[i], text=new_text)
        result.assets = localized.assets
        result.warnings.extend(localized.warnings)

    text = normalize_captions(text)
    regions = finish_regions(regions)
    text = restore(text, regions)

    unresolved = find_unresolved_tokens(text)
    if unresolved:
        log.warning(
            "Unresolved placeholder tokens in output",
            extra={
                "extra_fields": {
                    "op": "normalize",
                    "document_id": document.id,
                    "tokens": unresolved,
                }
            },
        )
        result.warnings.append(
            SyncWarning(
                code="UNRESOLVED_PLACEHOLDER",
                message=f"{len(unresolved)} placeholder token(s) left in output",
                context={"tokens": unresolved},
            )
        )

    result.text = text
    return result
