# OCR Client - REST API client for Invoice Scan Normalizer
# Sends invoice photos to the OCR endpoint and returns its raw JSON guess

import requests
import logging
import time
from typing import Dict, Any, List, Optional


logger = logging.getLogger(__name__)

# Status codes that will not get better by asking again
_NO_RETRY_STATUS = {400: 'Bad request', 401: 'Authentication failed', 413: 'Image too large'}


class OcrClient:
    """REST API client for the invoice OCR endpoint"""

    def __init__(self, base_url: str, api_key: str = None, timeout: int = 60,
                 analyze_path: str = '/api/analyze', max_retries: int = 3,
                 retry_delay: float = 2):
        self.base_url = base_url.rstrip('/')
        self.analyze_path = analyze_path if analyze_path.startswith('/') else '/' + analyze_path
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()

        if api_key:
            self.session.headers.update({'Authorization': f'Bearer {api_key}'})

        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': 'Invoice-Scan-Normalizer/1.0'
        })

        self.max_retries = max_retries
        self.retry_delay = retry_delay  # seconds, grows linearly per attempt

    def analyze(self, base64_data: str, mime_type: str, prompt: str,
                temperature: float = 0.05) -> Dict[str, Any]:
        """Run one OCR pass over an image; the raw guess is in result['body']"""
        endpoint = f"{self.base_url}{self.analyze_path}"
        payload = {
            'base64Data': base64_data,
            'mimeType': mime_type,
            'prompt': prompt,
            'temperature': temperature,
        }

        for attempt in range(self.max_retries):
            try:
                response = self.session.post(endpoint, json=payload, timeout=self.timeout)

                if response.status_code == 200:
                    try:
                        body = response.json()
                    except ValueError:
                        logger.error(f"OCR endpoint returned invalid JSON: {response.text[:200]}")
                        return {
                            'success': False,
                            'error': 'OCR endpoint returned invalid JSON',
                            'status_code': 502,
                            'retry': False
                        }
                    if not isinstance(body, dict):
                        return {
                            'success': False,
                            'error': 'OCR endpoint returned a non-object body',
                            'status_code': 502,
                            'retry': False
                        }
                    logger.info(f"OCR pass returned {len(body.get('items') or [])} row(s)")
                    return {
                        'success': True,
                        'body': body,
                        'status_code': response.status_code
                    }

                elif response.status_code in _NO_RETRY_STATUS:
                    reason = _NO_RETRY_STATUS[response.status_code]
                    logger.error(f"{reason} from OCR endpoint: {response.text[:200]}")
                    return {
                        'success': False,
                        'error': response.text or reason,
                        'status_code': response.status_code,
                        'retry': False
                    }

                else:
                    logger.warning(f"OCR endpoint error {response.status_code}, retry {attempt + 1}/{self.max_retries}")
                    time.sleep(self.retry_delay * (attempt + 1))

            except requests.exceptions.Timeout:
                logger.warning(f"Timeout, retry {attempt + 1}/{self.max_retries}")
                time.sleep(self.retry_delay * (attempt + 1))

            except requests.exceptions.ConnectionError:
                logger.warning(f"Connection error, retry {attempt + 1}/{self.max_retries}")
                time.sleep(self.retry_delay * (attempt + 1))

            except requests.exceptions.RequestException as e:
                logger.error(f"Unexpected request error: {e}")
                return {
                    'success': False,
                    'error': str(e),
                    'status_code': 0,
                    'retry': False
                }

        return {
            'success': False,
            'error': 'Max retries exceeded',
            'status_code': 0,
            'retry': True
        }

    def check_health(self) -> bool:
        """Check if the OCR endpoint is reachable"""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False


# Stub implementation for offline use and testing
class StubOcrClient:
    """Replays canned OCR responses in order"""

    def __init__(self, responses: Optional[List[Dict]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def analyze(self, base64_data: str, mime_type: str, prompt: str,
                temperature: float = 0.05) -> Dict[str, Any]:
        self.calls.append({'mime_type': mime_type, 'prompt': prompt, 'temperature': temperature})
        if not self.responses:
            logger.info("[STUB] No canned OCR response left")
            return {'success': True, 'body': {'items': []}, 'status_code': 200}
        body = self.responses.pop(0)
        logger.info(f"[STUB] OCR pass {len(self.calls)} returned {len(body.get('items') or [])} row(s)")
        return {'success': True, 'body': body, 'status_code': 200}

    def check_health(self) -> bool:
        return True
