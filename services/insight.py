"""
Decorative "insight" blurbs for the company detail view.

OpenAIInsightGenerator always resolves to text: the model's answer, or a
fixed fallback when the API key is missing or the call fails. InsightPanel
runs it off the request thread, one view per browser, and keeps a result
only if that viewer still has the same company selected when the call
returns.
"""
import logging
import threading
from collections import OrderedDict
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from openai import OpenAI

UNAVAILABLE_TEXT = "AI insights are currently unavailable. Please configure the API key."
FAILED_TEXT = "Unable to load AI insights at this moment."

PROMPT = (
    "You are a business analyst.\n"
    'Write a short, professional 2-sentence description for a company named "{name}" '
    'in the "{industry}" industry.\n'
    "Focus on why a client should book a meeting.\n"
    "Do not use markdown."
)

InsightFn = Callable[[str, str], str]

# Viewer key used when no per-browser id is given (CLI, scripts)
DEFAULT_VIEWER = "default"

logger = logging.getLogger(__name__)


class OpenAIInsightGenerator:
    def __init__(self, api_key: Optional[str], model: str = "gpt-4o-mini", timeout: float = 15.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None and self.api_key:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def __call__(self, company_name: str, industry: str) -> str:
        if not self.client:
            return UNAVAILABLE_TEXT
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": PROMPT.format(name=company_name, industry=industry)}],
                max_tokens=120,
            )
            text = (resp.choices[0].message.content or "").strip()
            return text or FAILED_TEXT
        except Exception as exc:
            logger.warning("Insight generation failed for %r: %s", company_name, exc)
            return FAILED_TEXT


class _View:
    __slots__ = ("selected", "text", "future")

    def __init__(self):
        self.selected: Optional[str] = None
        self.text: Optional[str] = None
        self.future: Optional[Future] = None


class InsightPanel:
    """
    Insight state for each viewer's detail view: which company that viewer
    has selected and what text (if any) has arrived for it.

    The worker pool lives as long as the app. Worker threads are joined at
    interpreter exit by concurrent.futures; call shutdown() to stop earlier.
    """

    def __init__(
        self,
        generate: InsightFn,
        max_workers: int = 2,
        max_viewers: int = 1000,
        log: Optional[logging.Logger] = None,
    ):
        self.generate = generate
        self.max_viewers = max_viewers
        self.log = log or logger
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="insight")
        self._lock = threading.Lock()
        # least recently used viewer first
        self._views: "OrderedDict[str, _View]" = OrderedDict()

    def _view(self, viewer: str) -> _View:
        view = self._views.get(viewer)
        if view is None:
            view = self._views[viewer] = _View()
            while len(self._views) > self.max_viewers:
                self._views.popitem(last=False)
        else:
            self._views.move_to_end(viewer)
        return view

    def select(self, company_id: str, company_name: str, industry: str, viewer: str = DEFAULT_VIEWER) -> Future:
        with self._lock:
            view = self._view(viewer)
            view.selected = company_id
            view.text = None
            view.future = self._executor.submit(self._run, viewer, company_id, company_name, industry)
            return view.future

    def clear(self, viewer: str = DEFAULT_VIEWER) -> None:
        with self._lock:
            self._views.pop(viewer, None)

    def _run(self, viewer: str, company_id: str, company_name: str, industry: str) -> str:
        try:
            text = self.generate(company_name, industry)
        except Exception:
            self.log.exception("Insight generator raised for %r", company_name)
            text = FAILED_TEXT
        self._apply(viewer, company_id, text)
        return text

    def _apply(self, viewer: str, company_id: str, text: str) -> None:
        with self._lock:
            view = self._views.get(viewer)
            selected = view.selected if view else None
            if selected != company_id:
                self.log.info("INSIGHT_STALE_DISCARDED company_id=%s selected=%s", company_id, selected)
                return
            view.text = text

    def wait(self, timeout: Optional[float] = None, viewer: str = DEFAULT_VIEWER) -> dict:
        """Block until the viewer's latest job is done (CLI and tests)."""
        with self._lock:
            view = self._views.get(viewer)
            future = view.future if view else None
        if future is not None:
            future.result(timeout=timeout)
        return self.state(viewer)

    def state(self, viewer: Optional[str] = DEFAULT_VIEWER) -> dict:
        with self._lock:
            view = self._views.get(viewer) if viewer else None
            if view is None or view.selected is None:
                return {"company_id": None, "status": "idle", "text": None}
            status = "pending" if view.text is None else "ready"
            return {"company_id": view.selected, "status": status, "text": view.text}

    @property
    def viewer_count(self) -> int:
        with self._lock:
            return len(self._views)

    def shutdown(self) -> None:
        # queued jobs are dropped; a running generator call finishes on its own
        self._executor.shutdown(wait=False, cancel_futures=True)
