"""In-process stand-in for the REST client, used by the standalone runner."""

import time

from core.config import EDITABLE_WORD_FIELDS
from core.interfaces import Storage
from core.models import Word, StudentProfile
from core.scheduling import ManualScheduler
from server.practice_host import PracticeHost
from cli.api_client import NothingToPractice


class LocalClient:
    """Same calls and response shapes as SpelldrillAPIClient, without a server.

    Timers run on a ManualScheduler that wait() moves forward.
    """

    def __init__(self, storage: Storage, sleep=time.sleep, rng=None):
        self.storage = storage
        self.base_url = 'local'
        self.scheduler = ManualScheduler()
        self.hosts = {}
        self._sleep = sleep
        self.rng = rng

    def _host(self, list_id: str) -> PracticeHost:
        if list_id not in self.hosts:
            self.hosts[list_id] = PracticeHost(list_id, self.storage, self.scheduler, self.rng)
        return self.hosts[list_id]

    def health_check(self) -> dict:
        return {'service': 'spelldrill (local)'}

    def list_word_lists(self) -> list[dict]:
        return [word_list.to_summary() for word_list in self.storage.list_word_lists()]

    def get_word_list(self, list_id: str) -> dict:
        return self.storage.get_word_list(list_id).to_dict()

    def create_word_list(self, title: str) -> dict:
        if not title.strip():
            return {'success': False, 'error': 'List title cannot be empty'}
        return {'success': True, 'list': self.storage.create_word_list(title).to_summary()}

    def delete_word_list(self, list_id: str) -> dict:
        self.hosts.pop(list_id, None)
        return {'success': self.storage.delete_word_list(list_id)}

    def add_word(self, list_id: str, text: str, definition: str = None,
                 part_of_speech: str = None, example_sentence: str = None) -> dict:
        if not text.strip():
            return {'success': False, 'error': 'Word cannot be empty'}
        word = Word.create(text, definition, part_of_speech, example_sentence)
        self.storage.add_word(list_id, word)
        return {'success': True, 'word': word.to_dict()}

    def update_word(self, list_id: str, word_id: str, field: str, value: str) -> dict:
        if field not in EDITABLE_WORD_FIELDS:
            return {'success': False, 'error': f"Field must be one of: {', '.join(EDITABLE_WORD_FIELDS)}"}
        word = self.storage.update_word(list_id, word_id, field, value)
        return {'success': True, 'word': word.to_dict()}

    def delete_word(self, list_id: str, word_id: str) -> dict:
        return {'success': self.storage.delete_word(list_id, word_id)}

    def get_profile(self) -> dict:
        profile = self.storage.load_profile()
        return {'profile': profile.to_dict(), 'complete': profile.is_complete}

    def save_profile(self, name: str, s_class: str = '', class_num: str = '') -> dict:
        profile = StudentProfile(name.strip(), s_class.strip(), class_num.strip())
        if not profile.is_complete:
            return {'success': False, 'error': 'Name is required'}
        self.storage.save_profile(profile)
        return {'success': True, 'profile': profile.to_dict()}

    def start_practice(self, list_id: str) -> dict:
        host = self._host(list_id)
        if host.start() is None:
            raise NothingToPractice(list_id)
        return host.snapshot()

    def get_practice(self, list_id: str) -> dict:
        return self._host(list_id).snapshot()

    def submit_answer(self, list_id: str, answer: str) -> dict:
        host = self._host(list_id)
        host.controller.submit_answer(answer)
        return host.snapshot()

    def repeat_word(self, list_id: str) -> dict:
        host = self._host(list_id)
        host.controller.repeat_word()
        return host.snapshot()

    def wait(self, ms: int) -> None:
        self._sleep(ms / 1000)
        self.scheduler.advance(ms)
