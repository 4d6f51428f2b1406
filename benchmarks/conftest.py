"""
Shared fixtures for benchmark tests.
"""

import json

import pytest


def make_frames(num_fragments: int, num_candidates: int = 1) -> list[str]:
    """Build SSE frames for a response that grows by one word per fragment."""
    frames = []
    text = ""
    for i in range(num_fragments):
        text += f"word{i} "
        fragment = {
            "candidates": [
                {
                    "index": c,
                    "content": {"role": "model", "parts": [{"text": text}]},
                }
                for c in range(num_candidates)
            ],
            "usageMetadata": {"totalTokenCount": i + 1},
        }
        frames.append(f"data: {json.dumps(fragment)}\r\n\r\n")
    return frames


def rechunk(body: str, chunk_size: int) -> list[str]:
    """Split a body into fixed-size chunks that ignore frame boundaries."""
    return [body[i : i + chunk_size] for i in range(0, len(body), chunk_size)]


@pytest.fixture
def frames():
    """500 single-candidate frames."""
    return make_frames(500)


@pytest.fixture
def multi_candidate_frames():
    """500 frames carrying 4 candidates each."""
    return make_frames(500, num_candidates=4)


@pytest.fixture
def small_chunks(frames):
    """The single-candidate body re-split into 64-character network reads."""
    return rechunk("".join(frames), 64)
