"""
Document Scanner - Streamlit Application

Upload photos of documents and get back flat, black-and-white scans:
- Automatic page outline detection
- Perspective correction
- Adaptive binarization
- JPEG and multi-page PDF download
"""

import logging
import os
from typing import Any, Dict, List

import streamlit as st

from docscanner import ScanConfig, ScanFailure, scan
from image_processing import (
    create_thumbnail,
    cv2_to_pil,
    decode_image,
    draw_quadrilateral,
    encode_jpeg,
    pdf_bytes,
)

logging.basicConfig(
    level=os.environ.get("DOCSCANNER_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FAILURE_HINTS = {
    ScanFailure.IMAGE_UNAVAILABLE: "The file could not be decoded as an image.",
    ScanFailure.NOT_FOUND: "No document outline found. Try a darker background or a straighter shot.",
    ScanFailure.DEGENERATE: "The detected outline is too thin to flatten.",
}


# Page configuration
st.set_page_config(
    page_title="Document Scanner",
    page_icon="📄",
    layout="wide",
)


def init_session_state():
    """Initialize session state variables."""
    if 'scanned_pages' not in st.session_state:
        st.session_state.scanned_pages = []


@st.cache_resource
def get_config() -> ScanConfig:
    """Pipeline configuration from DOCSCANNER_* environment variables."""
    return ScanConfig.from_env()


def scan_upload(filename: str, image_bytes: bytes, config: ScanConfig) -> Dict[str, Any]:
    """Run the scanner on one uploaded file and collect what the page shows."""
    image = decode_image(image_bytes)
    result = scan(image, config)

    entry = {
        'filename': filename,
        'failure': result.failure,
        'message': result.message,
        'preview': image,
        'page': None,
    }
    if result:
        entry['preview'] = draw_quadrilateral(image, result.value.quad)
        entry['page'] = result.value.image
        entry['corners'] = result.value.quad.to_flat()
    else:
        logger.info("Could not scan %s: %s", filename, result.message)
    return entry


def upload_section(config: ScanConfig):
    """Upload and processing controls."""
    st.subheader("📤 Upload Documents")

    uploaded_files = st.file_uploader(
        "Choose photos of documents",
        type=['jpg', 'jpeg', 'png', 'webp'],
        accept_multiple_files=True,
        key="document_uploader"
    )

    if uploaded_files and st.button("🔍 Scan Documents", type="primary"):
        progress = st.progress(0)
        status = st.empty()

        pages = []
        for i, uploaded_file in enumerate(uploaded_files):
            status.text(f"Scanning {uploaded_file.name}...")
            pages.append(scan_upload(uploaded_file.name, uploaded_file.read(), config))
            progress.progress((i + 1) / len(uploaded_files))

        st.session_state.scanned_pages = pages
        found = sum(1 for p in pages if p['page'] is not None)
        status.text(f"✅ {found} of {len(pages)} documents scanned")


def results_section(pages: List[Dict[str, Any]], config: ScanConfig):
    """Show each photo with its outline next to the scanned page."""
    for i, entry in enumerate(pages):
        st.markdown(f"**{entry['filename']}**")
        col1, col2 = st.columns(2)

        with col1:
            if entry['preview'] is not None:
                st.image(create_thumbnail(entry['preview'], (600, 600)), caption="Detected outline")

        with col2:
            if entry['page'] is None:
                st.warning(FAILURE_HINTS.get(entry['failure'], entry['message']))
                continue

            st.image(cv2_to_pil(entry['page']), caption="Scan", use_container_width=True)
            st.caption("Corners (TL, TR, BR, BL): " + ", ".join(f"{v:.0f}" for v in entry['corners']))

            jpeg = encode_jpeg(entry['page'], config.jpeg_quality)
            if jpeg is None:
                st.error("Could not encode the scan as JPEG.")
            else:
                name = os.path.splitext(entry['filename'])[0]
                st.download_button(
                    "⬇️ Download JPEG",
                    data=jpeg,
                    file_name=f"{name}_scan.jpg",
                    mime="image/jpeg",
                    key=f"download_{i}"
                )

    scanned = [entry['page'] for entry in pages if entry['page'] is not None]
    if len(scanned) > 0:
        st.divider()
        st.download_button(
            f"📑 Download {len(scanned)} page PDF",
            data=pdf_bytes(scanned),
            file_name="scan.pdf",
            mime="application/pdf",
        )


def main():
    """Main application entry point."""
    init_session_state()
    config = get_config()

    st.title("📄 Document Scanner")

    upload_section(config)

    if st.session_state.scanned_pages:
        st.divider()
        results_section(st.session_state.scanned_pages, config)


if __name__ == "__main__":
    main()
