from __future__ import annotations


class InvoiceRenderError(Exception):
    """Base class for failures while producing an invoice PDF."""


class RenderError(InvoiceRenderError):
    """The drawing surface failed while pages were being built."""


class FinalizationError(InvoiceRenderError):
    """The finished pages could not be serialized into PDF bytes."""
