"""
Thin ``requests`` client for the jewelcrm REST API.

Success bodies are returned as parsed JSON (``{"data": ...}``); any non-2xx
response raises :class:`ApiError` carrying the server's ``error`` message.
Transport failures surface as ``requests.RequestException``.
"""
import logging

import requests

logger = logging.getLogger('jewelcrm.panels')


class ApiError(Exception):
    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class CrmApiClient:
    def __init__(self, base_url, token=None, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        if token:
            self.set_token(token)

    def set_token(self, token):
        self.session.headers.update({'Authorization': f'Bearer {token}'})

    def authenticate(self, username, password):
        """Obtain a JWT pair and use the access token for later calls"""
        response = self.session.post(
            f"{self.base_url}/auth/login/",
            json={'username': username, 'password': password},
            timeout=self.timeout,
        )
        body = self._parse(response)
        if response.status_code != 200:
            raise ApiError(body.get('error') or f"Authentication failed: {response.status_code}", response.status_code)
        self.set_token(body['access'])
        logger.info(f"Authenticated against {self.base_url} as {username}")
        return body

    def _parse(self, response):
        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {'error': response.text[:500]}
        return body if isinstance(body, dict) else {'data': body}

    def request(self, method, path, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)
        response = self.session.request(method, url, **kwargs)
        body = self._parse(response)
        if not response.ok:
            message = body.get('error') or f"Request failed with status {response.status_code}"
            logger.warning(f"{method} {url} failed: {response.status_code} {message}")
            raise ApiError(message, response.status_code, body.get('details'))
        return body

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, payload=None):
        return self.request('POST', path, json=payload or {})

    def put(self, path, payload):
        return self.request('PUT', path, json=payload)

    def patch(self, path, payload):
        return self.request('PATCH', path, json=payload)

    def delete(self, path):
        return self.request('DELETE', path)
