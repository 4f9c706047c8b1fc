"""
Services package for the DocVerse backend.

This package contains the core business logic:
- policy: engine selection and cloud -> local fallback
- local_tools / cloud: the two kinds of engine invoker
- office_service, compress_service, ocr_service: per-capability engines
- pdf_service: in-process merge, unlock, page concatenation
- workspace: scoped temporary directories
- converter: request dispatch used by the API
"""
