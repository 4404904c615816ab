# frontend/api_client.py
"""HTTP calls the dashboard makes against the backend API."""
import logging
import os
from concurrent.futures import ThreadPoolExecutor

import requests

logger = logging.getLogger("finance-frontend")

API_BASE = os.environ.get("API_BASE", "http://localhost:5000/api")
RECORD_TYPES = ("expenses", "incomes", "investments")


class ApiError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpired(ApiError):
    """401 on an authenticated call; the caller should log out."""


def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


def api_request(method, path, token=None, json=None, timeout=10, base=None):
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    url = (base or API_BASE).rstrip("/") + path

    try:
        response = requests.request(method.upper(), url, headers=headers, json=json, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Connection to {url} failed: {e}")
        raise ApiError(f"Connection failed: {e}")

    if response.status_code == 401 and token:
        logger.warning(f"{method.upper()} {path} returned 401, session expired")
        raise SessionExpired("Please log in again.", 401)
    if response.status_code >= 400:
        payload = safe_json(response) or {}
        message = payload.get("message") or f"Request failed ({response.status_code})"
        logger.error(f"{method.upper()} {path} failed: {response.status_code} {message}")
        raise ApiError(message, response.status_code)
    return safe_json(response)


# ---------------- Authentication ----------------
def login(email, password, base=None):
    return api_request("POST", "/login", json={"email": email, "password": password}, base=base)


def register(username, email, password, base=None):
    return api_request(
        "POST", "/register", json={"username": username, "email": email, "password": password}, base=base
    )


# ---------------- Records ----------------
def fetch_records(record_type, token, base=None):
    return api_request("GET", f"/{record_type}", token=token, base=base) or []


def fetch_all(token, base=None):
    """All three record lists, fetched in parallel."""
    with ThreadPoolExecutor(max_workers=len(RECORD_TYPES)) as pool:
        futures = {t: pool.submit(fetch_records, t, token, base) for t in RECORD_TYPES}
        return {t: f.result() for t, f in futures.items()}


def add_record(record_type, token, fields, base=None):
    return api_request("POST", f"/{record_type}", token=token, json=fields, base=base)


def delete_record(record_type, record_id, token, base=None):
    return api_request("DELETE", f"/{record_type}/{record_id}", token=token, base=base)
