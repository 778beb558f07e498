"""File-based storage implementation."""

import json
import logging
import os

from core.config import CONFIG_FILE
from core.interfaces import Storage
from core.models import Word, WordList, Mastery, StudentProfile

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """File-based storage implementation.

    Word lists live in one JSON file and the profile in another, both under
    state_dir.
    """

    def __init__(self, config_file: str = None, state_dir: str = None):
        self.config_file = config_file or os.path.expanduser(CONFIG_FILE)
        # Project root is one level up from server/
        project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.state_dir = state_dir or os.environ.get('SPELLDRILL_STATE_DIR') or project_root

    def _get_lists_file(self) -> str:
        return os.path.join(self.state_dir, 'spelldrill_lists.json')

    def _get_profile_file(self) -> str:
        return os.path.join(self.state_dir, 'spelldrill_profile.json')

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def _load_lists(self) -> list[dict]:
        """Load all word lists as raw dicts."""
        lists_file = self._get_lists_file()
        if os.path.exists(lists_file):
            try:
                with open(lists_file, 'r') as f:
                    return json.load(f)
            except (OSError, ValueError) as e:
                logger.error(f"Could not read {lists_file}: {e}")
                return []
        return []

    def _save_lists(self, lists: list[dict]) -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        with open(self._get_lists_file(), 'w') as f:
            json.dump(lists, f, indent=2, ensure_ascii=False)

    def _find(self, lists: list[dict], list_id: str) -> dict:
        for data in lists:
            if str(data['id']) == str(list_id):
                return data
        raise KeyError(list_id)

    def list_word_lists(self) -> list[WordList]:
        return [WordList.from_dict(data) for data in self._load_lists()]

    def get_word_list(self, list_id: str) -> WordList:
        return WordList.from_dict(self._find(self._load_lists(), list_id))

    def words(self, list_id: str) -> list[Word]:
        return self.get_word_list(list_id).words

    def create_word_list(self, title: str) -> WordList:
        word_list = WordList.create(title)
        lists = self._load_lists()
        lists.append(word_list.to_dict())
        self._save_lists(lists)
        return word_list

    def delete_word_list(self, list_id: str) -> bool:
        lists = self._load_lists()
        remaining = [data for data in lists if str(data['id']) != str(list_id)]
        if len(remaining) == len(lists):
            return False
        self._save_lists(remaining)
        return True

    def add_word(self, list_id: str, word: Word) -> None:
        lists = self._load_lists()
        data = self._find(lists, list_id)
        data.setdefault('words', []).append(word.to_dict())
        self._save_lists(lists)

    def update_word(self, list_id: str, word_id: str, field: str, value: str) -> Word:
        lists = self._load_lists()
        data = self._find(lists, list_id)
        for i, raw in enumerate(data.get('words', [])):
            if str(raw['id']) == str(word_id):
                updated = Word.from_dict(raw).with_field(field, value)
                data['words'][i] = updated.to_dict()
                self._save_lists(lists)
                return updated
        raise KeyError(word_id)

    def delete_word(self, list_id: str, word_id: str) -> bool:
        lists = self._load_lists()
        data = self._find(lists, list_id)
        words = data.get('words', [])
        remaining = [raw for raw in words if str(raw['id']) != str(word_id)]
        if len(remaining) == len(words):
            return False
        data['words'] = remaining
        self._save_lists(lists)
        return True

    def record(self, list_id: str, correct: int, total: int) -> None:
        lists = self._load_lists()
        data = self._find(lists, list_id)
        data['mastery'] = Mastery(correct, total).to_dict()
        self._save_lists(lists)

    def load_profile(self) -> StudentProfile:
        profile_file = self._get_profile_file()
        if os.path.exists(profile_file):
            try:
                with open(profile_file, 'r') as f:
                    return StudentProfile.from_dict(json.load(f))
            except (OSError, ValueError) as e:
                logger.error(f"Could not read {profile_file}: {e}")
        return StudentProfile()

    def save_profile(self, profile: StudentProfile) -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        with open(self._get_profile_file(), 'w') as f:
            json.dump(profile.to_dict(), f, indent=2, ensure_ascii=False)
