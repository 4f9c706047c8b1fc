"""OCR pipeline: rasterize, recognize per page, join in order."""

import pytest

from docverse.models.conversion import Capability, EngineChoice, InputFile
from docverse.services import ocr_service
from docverse.services.converter import run_conversion
from docverse.services.exceptions import ConversionFailedError
from docverse.services.formats import cloud_ocr_locale, tesseract_language

from conftest import make_pdf, page_texts, pdf_file, posix_only, request_for, write_script

# Writes one "image" per page holding the page text, unpadded page numbers
FAKE_PDFTOPPM = """
import sys
import fitz
pdf_path, root = sys.argv[-2], sys.argv[-1]
doc = fitz.open(pdf_path)
for number, page in enumerate(doc, start=1):
    with open(f"{root}-{number}.jpg", "w") as f:
        f.write(page.get_text("text").strip())
"""

# Turns an "image" into a one-page PDF with "<text>|<lang>"
FAKE_TESSERACT = """
import sys
import time
import fitz
image, output_base, lang = sys.argv[1], sys.argv[2], sys.argv[4]
text = open(image).read().strip()
if text.startswith("bad"):
    sys.stderr.write("Error in pixReadStream")
    sys.exit(1)
if text.startswith("slow"):
    time.sleep(0.3)
doc = fitz.open()
doc.new_page().insert_text((72, 72), f"{text}|{lang}")
doc.save(output_base + ".pdf")
"""


@pytest.fixture
def ocr_settings(settings, tools_dir):
    return settings.model_copy(
        update={
            "pdftoppm_path": write_script(tools_dir, "pdftoppm", FAKE_PDFTOPPM),
            "tesseract_path": write_script(tools_dir, "tesseract", FAKE_TESSERACT),
        }
    )


@pytest.mark.parametrize(
    "ui_language, tesseract, cloud",
    [("en", "eng", "en-US"), ("de", "deu", "de-DE"), ("xx", "eng", "en-US")],
)
def test_language_maps(ui_language, tesseract, cloud):
    assert tesseract_language(ui_language) == tesseract
    assert cloud_ocr_locale(ui_language) == cloud


@posix_only
@pytest.mark.asyncio
async def test_local_ocr_keeps_page_order(ocr_settings, workspace_root):
    texts = [f"page{n}" for n in range(1, 12)]
    request = request_for(Capability.OCR, pdf_file("scan.pdf", *texts))

    result = await run_conversion(request, ocr_settings)

    assert page_texts(result.data) == [f"{t}|eng" for t in texts]
    assert result.filename == "scan-searchable.pdf"
    assert result.engine == EngineChoice.LOCAL
    assert list(workspace_root.iterdir()) == []


@posix_only
@pytest.mark.asyncio
async def test_parallel_pages_still_come_back_in_order(ocr_settings):
    parallel = ocr_settings.model_copy(update={"ocr_max_workers": 2})
    request = request_for(Capability.OCR, pdf_file("scan.pdf", "slow1", "fast2"))

    result = await run_conversion(request, parallel)

    assert page_texts(result.data) == ["slow1|eng", "fast2|eng"]


@posix_only
@pytest.mark.asyncio
async def test_files_and_images_join_in_upload_order(ocr_settings):
    image = InputFile(filename="photo.png", content_type="image/png", data=b"photo")
    request = request_for(
        Capability.OCR,
        pdf_file("a.pdf", "a1", "a2"),
        image,
        pdf_file("b.pdf", "b1"),
        language="fr",
    )

    result = await run_conversion(request, ocr_settings)

    assert page_texts(result.data) == ["a1|fra", "a2|fra", "photo|fra", "b1|fra"]


@posix_only
@pytest.mark.asyncio
async def test_image_labelled_as_pdf_is_still_an_image(ocr_settings):
    mislabelled = InputFile(filename="scan.png", content_type="application/pdf", data=b"PNG-scan")

    result = await run_conversion(request_for(Capability.OCR, mislabelled), ocr_settings)

    assert page_texts(result.data) == ["PNG-scan|eng"]


def test_pdf_detection_reads_the_bytes():
    assert InputFile(filename="upload.bin", content_type="", data=make_pdf("x")).is_pdf
    gif = InputFile(filename="scan.pdf", content_type="application/pdf", data=b"GIF89a")
    assert not gif.is_pdf


@posix_only
@pytest.mark.asyncio
async def test_failed_page_fails_request_and_cleans_up(ocr_settings, workspace_root):
    request = request_for(Capability.OCR, pdf_file("scan.pdf", "good", "bad page"))

    with pytest.raises(ConversionFailedError):
        await run_conversion(request, ocr_settings)

    assert list(workspace_root.iterdir()) == []


@posix_only
@pytest.mark.asyncio
async def test_cloud_rejects_images_so_local_runs(ocr_settings, cloud_settings, monkeypatch):
    settings = ocr_settings.model_copy(
        update={
            key: getattr(cloud_settings, key)
            for key in ("prefer_cloud_engine", "adobe_client_id", "adobe_client_secret")
        }
    )

    async def unexpected_cloud_job(*args, **kwargs):
        raise AssertionError("cloud job must not be submitted for images")

    monkeypatch.setattr(ocr_service, "run_cloud_job", unexpected_cloud_job)
    image = InputFile(filename="photo.jpg", content_type="image/jpeg", data=b"photo")

    result = await run_conversion(request_for(Capability.OCR, image), settings)

    assert result.engine == EngineChoice.LOCAL
    assert page_texts(result.data) == ["photo|eng"]


@pytest.mark.asyncio
async def test_cloud_ocr_runs_one_job_per_pdf(cloud_settings, monkeypatch):
    jobs = []

    async def fake_cloud_job(job_kind, input_bytes, job_params, settings, **kwargs):
        jobs.append((job_kind.value, job_params))
        return make_pdf(f"cloud{len(jobs)}")

    monkeypatch.setattr(ocr_service, "run_cloud_job", fake_cloud_job)
    request = request_for(
        Capability.OCR, pdf_file("a.pdf", "a"), pdf_file("b.pdf", "b"), language="es"
    )

    result = await run_conversion(request, cloud_settings)

    assert result.engine == EngineChoice.CLOUD
    assert page_texts(result.data) == ["cloud1", "cloud2"]
    assert jobs == [
        ("ocr", {"ocrLang": "es-ES", "ocrType": "searchable_image"}),
        ("ocr", {"ocrLang": "es-ES", "ocrType": "searchable_image"}),
    ]
