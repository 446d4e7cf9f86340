"""
Pytest configuration and shared fixtures.
"""

import pytest
import tempfile
from pathlib import Path

import httpx

PDF_BYTES = b"%PDF-1.4\n% test artifact\n%%EOF\n"


@pytest.fixture
def temp_directory():
    """Create temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def requests_seen():
    """Requests received by the mock PDF server."""
    return []


@pytest.fixture
def http_client(requests_seen):
    """HTTP client backed by a mock PDF server.

    Paths ending in ``missing.pdf`` return 404, ``/size/<n>.pdf`` returns n
    bytes, anything else returns a small PDF.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        path = request.url.path
        if path.endswith("missing.pdf"):
            return httpx.Response(404)
        if path.startswith("/size/"):
            size = int(path[len("/size/"):-len(".pdf")])
            return httpx.Response(200, content=b"x" * size)
        return httpx.Response(200, content=PDF_BYTES)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    yield client
    client.close()


@pytest.fixture
def sample_paper_text():
    """Text shaped like pdfminer output for a short paper."""
    return (
        "Attention Is All You Need\n"
        "Ashish Vaswani, Noam Shazeer\n"
        "\n"
        "Abstract\n"
        "The dominant sequence transduction models are based on recurrent networks.\n"
        "We propose the Transformer.\n"
        "\n"
        "1. Introduction\n"
        "Recurrent neural networks have been firmly established.\n"
        "\n"
        "3 Methods\n"
        "The Transformer follows an encoder-decoder architecture.\n"
        "\n"
        "Results\n"
        "The Transformer achieves 28.4 BLEU.\n"
        "\n"
        "Conclusion\n"
        "We presented the Transformer, based entirely on attention.\n"
        "\n"
        "References\n"
        "[1] Jimmy Lei Ba, Jamie Ryan Kiros. Layer normalization. 2016.\n"
        "[2] Dzmitry Bahdanau, Kyunghyun Cho. Neural machine translation. 2014.\n"
        "Available at doi 10.5555/3295222.3295349 online\n"
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file names."""
    for item in items:
        if "test_integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
