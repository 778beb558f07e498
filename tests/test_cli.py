"""Tests for the console client, its API clients and speech helpers."""

import io
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock

import requests

from core.interfaces import AudioNotifier, SpeechNarrator
from cli.api_client import NothingToPractice, SpelldrillAPIClient
from cli.console import ConsoleUI
from cli.local_client import LocalClient
from cli.speech import ConsoleNarrator, TerminalNotifier
from server.file_storage import FileStorage


class IdentityRandom:
    def randint(self, a, b):
        return b


class MockNarrator(SpeechNarrator):
    def __init__(self):
        self.spoken = []

    def speak(self, text: str) -> None:
        self.spoken.append(text)


class MockNotifier(AudioNotifier):
    def __init__(self):
        self.played = []

    def play(self, kind: str) -> None:
        self.played.append(kind)


def scripted_input(lines: list[str]):
    """input() replacement that replays lines in order."""
    remaining = list(lines)

    def fake_input(prompt=''):
        if not remaining:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return remaining.pop(0)

    return fake_input


class TestAPIClient(unittest.TestCase):

    def setUp(self):
        self.client = SpelldrillAPIClient('http://example.test/')
        self.client.session = MagicMock()
        self.response = MagicMock()
        self.response.json.return_value = {'success': True}
        self.client.session.request.return_value = self.response

    def test_base_url_trailing_slash(self):
        self.assertEqual(self.client.base_url, 'http://example.test')

    def test_submit_answer(self):
        self.client.submit_answer('l1', 'cat')
        self.client.session.request.assert_called_once_with(
            'POST', 'http://example.test/api/practice/l1/answer', json={'answer': 'cat'}, params=None
        )

    def test_update_word_uses_patch(self):
        self.client.update_word('l1', 'w1', 'definition', '貓')
        args, kwargs = self.client.session.request.call_args
        self.assertEqual(args, ('PATCH', 'http://example.test/api/lists/l1/words/w1'))
        self.assertEqual(kwargs['json'], {'field': 'definition', 'value': '貓'})

    def test_start_practice_empty_list(self):
        error_response = MagicMock(status_code=409)
        self.response.raise_for_status.side_effect = requests.HTTPError(response=error_response)
        with self.assertRaises(NothingToPractice):
            self.client.start_practice('l1')

    def test_start_practice_other_errors_propagate(self):
        error_response = MagicMock(status_code=404)
        self.response.raise_for_status.side_effect = requests.HTTPError(response=error_response)
        with self.assertRaises(requests.HTTPError):
            self.client.start_practice('l1')


class TestSpeech(unittest.TestCase):

    def test_narrator_uses_first_engine_found(self):
        popen = MagicMock()
        which = lambda name: '/usr/bin/espeak' if name == 'espeak' else None
        narrator = ConsoleNarrator({'speech_rate': 1.0}, which=which, popen=popen)
        narrator.speak('cat')
        command = popen.call_args[0][0]
        self.assertEqual(command, ['/usr/bin/espeak', '-s', '175', '-v', 'en-us', 'cat'])

    def test_narrator_cancels_previous_utterance(self):
        process = MagicMock()
        process.poll.return_value = None
        popen = MagicMock(return_value=process)
        narrator = ConsoleNarrator(which=lambda name: f"/usr/bin/{name}", popen=popen)
        narrator.speak('cat')
        narrator.speak('dog')
        process.terminate.assert_called_once()
        self.assertEqual(popen.call_count, 2)

    def test_narrator_without_engine(self):
        popen = MagicMock()
        with self.assertLogs('cli.speech', level='WARNING'):
            narrator = ConsoleNarrator(which=lambda name: None, popen=popen)
        narrator.speak('cat')
        self.assertFalse(narrator.available)
        popen.assert_not_called()

    def test_terminal_notifier(self):
        stream = io.StringIO()
        notifier = TerminalNotifier(stream)
        notifier.play('correct')
        notifier.play('wrong')
        self.assertEqual(stream.getvalue(), '\a\a\a')


class TestConsoleUI(unittest.TestCase):

    def setUp(self):
        self.state_dir = tempfile.mkdtemp()
        self.storage = FileStorage(config_file=f"{self.state_dir}/config.json", state_dir=self.state_dir)
        self.client = LocalClient(self.storage, sleep=lambda seconds: None, rng=IdentityRandom())
        self.narrator = MockNarrator()
        self.notifier = MockNotifier()

    def tearDown(self):
        shutil.rmtree(self.state_dir)

    def run_ui(self, lines: list[str]) -> str:
        ui = ConsoleUI(self.client, self.narrator, self.notifier, input_func=scripted_input(lines))
        output = io.StringIO()
        with redirect_stdout(output):
            ui.run()
        return output.getvalue()

    def test_full_practice_session(self):
        output = self.run_ui([
            'Amy', '3A', '12',
            'new Animals',
            '1',
            'add cat', 'animal', 'noun', '',
            'add dog', '', '', '',
            'practice',
            ':repeat', 'cat',
            'dgo',
            'dog',
            'back',
            'exit'
        ])
        self.assertEqual(self.narrator.spoken, ['cat', 'cat', 'dog', 'dog'])
        self.assertEqual(self.notifier.played, ['correct', 'wrong', 'correct'])
        self.assertIn('Round 1 Complete!', output)
        self.assertIn('Practice complete! Mastery: 1/2', output)

        word_list = self.storage.list_word_lists()[0]
        self.assertEqual(word_list.mastery.correct, 1)
        self.assertEqual(word_list.mastery.total, 2)
        self.assertEqual(word_list.words[0].definition, 'animal')
        self.assertEqual(self.storage.load_profile().name, 'Amy')

    def test_exit_does_not_record(self):
        word_list = self.storage.create_word_list('Animals')
        self.client.add_word(word_list.id, 'cat')
        self.client.save_profile('Amy')
        output = self.run_ui(['1', 'practice', ':exit', 'back', 'exit'])
        self.assertIn('will not be recorded', output)
        self.assertEqual(self.storage.get_word_list(word_list.id).mastery.total, 0)

    def test_command_words_can_be_spelled(self):
        word_list = self.storage.create_word_list('Commands')
        self.client.add_word(word_list.id, 'exit')
        self.client.add_word(word_list.id, 'repeat')
        self.client.save_profile('Amy')
        output = self.run_ui(['1', 'practice', 'exit', 'repeat', 'back', 'exit'])
        self.assertNotIn('will not be recorded', output)
        self.assertIn('Practice complete! Mastery: 2/2', output)
        self.assertEqual(self.narrator.spoken, ['exit', 'repeat'])
        self.assertEqual(self.storage.get_word_list(word_list.id).mastery.correct, 2)

    def test_practice_empty_list(self):
        self.storage.create_word_list('Empty')
        self.client.save_profile('Amy')
        output = self.run_ui(['1', 'practice', 'back', 'exit'])
        self.assertIn('no words yet', output)

    def test_delete_list_needs_confirmation(self):
        self.storage.create_word_list('Keep')
        self.client.save_profile('Amy')
        self.run_ui(['delete 1', 'n', 'exit'])
        self.assertEqual(len(self.storage.list_word_lists()), 1)
        self.run_ui(['delete 1', 'y', 'exit'])
        self.assertEqual(self.storage.list_word_lists(), [])


if __name__ == '__main__':
    unittest.main()
