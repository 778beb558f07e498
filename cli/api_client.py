"""REST API client for spelldrill server."""

import time

import requests


class NothingToPractice(Exception):
    """The chosen list has no words."""
    pass


class SpelldrillAPIClient:
    """Client for communicating with the spelldrill REST API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()

    def _request(self, method: str, endpoint: str, data: dict = None, params: dict = None) -> dict:
        response = self.session.request(method, f"{self.base_url}{endpoint}", json=data, params=params)
        response.raise_for_status()
        return response.json()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        return self._request('GET', endpoint, params=params)

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        return self._request('POST', endpoint, data=data or {})

    def health_check(self) -> dict:
        """Check if the server is running."""
        return self._get("/")

    def list_word_lists(self) -> list[dict]:
        return self._get("/api/lists")

    def get_word_list(self, list_id: str) -> dict:
        return self._get(f"/api/lists/{list_id}")

    def create_word_list(self, title: str) -> dict:
        return self._post("/api/lists", {'title': title})

    def delete_word_list(self, list_id: str) -> dict:
        return self._request('DELETE', f"/api/lists/{list_id}")

    def add_word(self, list_id: str, text: str, definition: str = None,
                 part_of_speech: str = None, example_sentence: str = None) -> dict:
        return self._post(f"/api/lists/{list_id}/words", {
            'text': text,
            'definition': definition,
            'part_of_speech': part_of_speech,
            'example_sentence': example_sentence
        })

    def update_word(self, list_id: str, word_id: str, field: str, value: str) -> dict:
        return self._request('PATCH', f"/api/lists/{list_id}/words/{word_id}",
                             data={'field': field, 'value': value})

    def delete_word(self, list_id: str, word_id: str) -> dict:
        return self._request('DELETE', f"/api/lists/{list_id}/words/{word_id}")

    def get_profile(self) -> dict:
        return self._get("/api/profile")

    def save_profile(self, name: str, s_class: str = '', class_num: str = '') -> dict:
        return self._request('PUT', "/api/profile",
                             data={'name': name, 's_class': s_class, 'class_num': class_num})

    def start_practice(self, list_id: str) -> dict:
        """Start practising a list. Raises NothingToPractice for empty lists."""
        try:
            return self._post(f"/api/practice/{list_id}/start")
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 409:
                raise NothingToPractice(list_id) from e
            raise

    def get_practice(self, list_id: str) -> dict:
        return self._get(f"/api/practice/{list_id}")

    def submit_answer(self, list_id: str, answer: str) -> dict:
        return self._post(f"/api/practice/{list_id}/answer", {'answer': answer})

    def repeat_word(self, list_id: str) -> dict:
        return self._post(f"/api/practice/{list_id}/repeat")

    def wait(self, ms: int) -> None:
        """Let the server's timers run."""
        time.sleep(ms / 1000)
