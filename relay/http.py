# relay/http.py
"""
Utilitário para requisições HTTP (baseado em requests.Session).

Oferece uma sessão persistente com:
- tentativa única por padrão (a GupShup não é re-tentada pelo relay)
- timeout padrão (com override por chamada)
- log de requisição/resposta com request id
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from relay.logging import get_logger, redact

logger = get_logger(__name__)


class HttpClient:
    """
    Cliente HTTP com sessão persistente.

    max_retries=0 mantém o comportamento de tentativa única; o adapter
    continua montado para que o pool de conexões seja reaproveitado.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = 30,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url or ""
        self.timeout = timeout

        self.session = requests.Session()
        if headers:
            self.session.headers.update(headers)
        retries = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods={"GET", "POST", "PUT", "DELETE", "PATCH"},
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def url_for(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Executa a requisição com log e tempo de execução.
        Permite override de timeout via kwargs['timeout'].
        """
        url = self.url_for(path)
        rid = str(uuid.uuid4())
        started = time.perf_counter()

        try:
            logger.debug("http.request", extra={"rid": rid, "method": method, "url": url})
            timeout = kwargs.pop("timeout", self.timeout)
            resp = self.session.request(method, url, timeout=timeout, **kwargs)
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            extra = {"rid": rid, "url": url, "status": resp.status_code, "elapsed_ms": elapsed_ms}
            # corpo só em erro: respostas de sucesso da Partner API trazem app_token
            if not resp.ok:
                extra["snippet"] = _redacted_snippet(resp)
            logger.info("http.response", extra=extra)
            return resp
        except requests.RequestException as e:
            logger.error("http.error", extra={"rid": rid, "url": url, "error": str(e)})
            raise

    def post_json(self, path: str, payload: Dict[str, Any], **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        headers.setdefault("Accept", "application/json")
        return self.request("POST", path, headers=headers, json=payload, **kwargs)

    def post_form(self, path: str, data: Dict[str, Any], **kwargs) -> requests.Response:
        headers = kwargs.pop("headers", {})
        headers.setdefault("Accept", "application/json")
        headers.setdefault("Content-Type", "application/x-www-form-urlencoded")
        return self.request("POST", path, headers=headers, data=data, **kwargs)


def _redacted_snippet(resp: requests.Response, limit: int = 200) -> str:
    try:
        return json.dumps(redact(resp.json()), ensure_ascii=False)[:limit]
    except ValueError:
        return resp.text[:limit]


def response_json(resp: requests.Response) -> Dict[str, Any]:
    """JSON do corpo, ou {"raw": texto} quando não for JSON."""
    try:
        data = resp.json()
    except ValueError:
        return {"raw": resp.text}
    return data if isinstance(data, dict) else {"data": data}
