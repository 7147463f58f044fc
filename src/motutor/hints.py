from __future__ import annotations

import json
import os
import sys
import time
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from motutor.chem.configuration import format_bond_order
from motutor.chem.placement import HintContext

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_S = 8.0
DEFAULT_TEMPERATURE = 0.7
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")
READ_CHUNK_BYTES = 1024

CONFIGURATION_EMPTY_FALLBACK = "Check the energy levels and ensure you follow the Aufbau principle."
CONFIGURATION_FAILURE_FALLBACK = (
    "Ensure you are filling orbitals from bottom to top (Aufbau) and placing one electron "
    "in each degenerate orbital before pairing (Hund's Rule)."
)
COMPARISON_EMPTY_FALLBACK = "Think about Bond Order = (Bonding - Antibonding) / 2"
COMPARISON_FAILURE_FALLBACK = "Hint unavailable."


class HintServiceError(RuntimeError):
    pass


class HintProvider(Protocol):
    def generate(self, prompt: str, timeout: float) -> str:
        ...


def api_key_from_env() -> str | None:
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


class GeminiHintProvider:
    """Text generation through the Generative Language REST endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float | None = DEFAULT_TEMPERATURE,
    ) -> None:
        self.api_key = api_key or api_key_from_env()
        self.model = model
        self.temperature = temperature

    def _request(self, prompt: str) -> urllib.request.Request:
        body: dict = {"contents": [{"parts": [{"text": prompt}]}]}
        if self.temperature is not None:
            body["generationConfig"] = {"temperature": float(self.temperature)}
        url = f"{GEMINI_BASE}/{urllib.parse.quote(self.model)}:generateContent"
        return urllib.request.Request(
            url,
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json", "x-goog-api-key": str(self.api_key)},
            method="POST",
        )

    def generate(self, prompt: str, timeout: float) -> str:
        if not self.api_key:
            raise HintServiceError("No API key configured for the hint service.")
        deadline = time.monotonic() + timeout
        chunks: list[bytes] = []
        with urllib.request.urlopen(self._request(prompt), timeout=timeout) as response:
            while True:
                if time.monotonic() > deadline:
                    raise HintServiceError(f"Hint service did not answer within {timeout:g} s.")
                chunk = response.read1(READ_CHUNK_BYTES)
                if not chunk:
                    break
                chunks.append(chunk)
        data = json.loads(b"".join(chunks).decode("utf-8"))
        return extract_text(data)


def extract_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict)).strip()


def build_configuration_prompt(context: HintContext) -> str:
    molecule = context.molecule
    occupancy = ", ".join(f"{orb.label} ({orb.id}): {orb.electrons}" for orb in context.orbitals)
    return f"""
You are a helpful Chemistry Tutor assisting a student with filling a Molecular Orbital (MO) diagram for {molecule.formula} ({molecule.name}).

Current State:
- Total electrons needed: {molecule.total_electrons}
- Electrons placed so far: {context.stats.electrons_placed}
- Orbital occupancy (lowest energy first): {occupancy}
- Bond Order: {format_bond_order(context.stats.bond_order)}
- Unpaired electrons: {context.stats.unpaired_electrons}

The student is asking for a hint.
Briefly analyze their progress.
If they have placed the wrong number of electrons, tell them.
If they violated Hund's rule (pairing before filling degenerate orbitals), point it out.
If they violated Aufbau (filling higher energy before lower), point it out.
Otherwise, give a hint about the next orbital to fill.

Keep the hint short (max 2 sentences) and encouraging. Do not simply give the answer.
""".strip()


def build_comparison_prompt(formulas: list[str]) -> str:
    return f"""
Compare the stability of these species: {', '.join(formulas)}.
Provide a subtle hint about their bond orders and how adding/removing electrons from antibonding orbitals affects stability.
Do not give the direct answer order. Max 2 sentences.
""".strip()


def _request_hint(
    provider: HintProvider,
    prompt: str,
    timeout: float,
    empty_fallback: str,
    failure_fallback: str,
) -> str:
    # One deadline for the whole call; a provider timeout may only bound single socket reads.
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(provider.generate, prompt, timeout)
    try:
        text = future.result(timeout=timeout)
    except Exception as exc:
        reason = exc if future.done() else f"no answer within {timeout:g} s"
        print(f"Hint service error: {reason}", file=sys.stderr)
        return failure_fallback
    finally:
        executor.shutdown(wait=False)
    text = str(text or "").strip()
    return text or empty_fallback


def request_configuration_hint(
    provider: HintProvider,
    context: HintContext,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> str:
    return _request_hint(
        provider,
        build_configuration_prompt(context),
        timeout,
        CONFIGURATION_EMPTY_FALLBACK,
        CONFIGURATION_FAILURE_FALLBACK,
    )


def request_comparison_hint(
    provider: HintProvider,
    formulas: list[str],
    timeout: float = DEFAULT_TIMEOUT_S,
) -> str:
    return _request_hint(
        provider,
        build_comparison_prompt(formulas),
        timeout,
        COMPARISON_EMPTY_FALLBACK,
        COMPARISON_FAILURE_FALLBACK,
    )
