"""Terminal narration and sound cues."""

import logging
import shutil
import subprocess

from core.config import SPEECH_LANGUAGE, SPEECH_RATE
from core.interfaces import AudioNotifier, SpeechNarrator

logger = logging.getLogger(__name__)

BASE_WORDS_PER_MINUTE = 175

# Engines tried in order: (executable, args builder)
SPEECH_ENGINES = [
    ('espeak-ng', lambda wpm, lang, voice: ['-s', str(wpm), '-v', voice or lang]),
    ('espeak', lambda wpm, lang, voice: ['-s', str(wpm), '-v', voice or lang]),
    ('say', lambda wpm, lang, voice: ['-r', str(wpm)] + (['-v', voice] if voice else [])),
]


class ConsoleNarrator(SpeechNarrator):
    """Speaks through a local text-to-speech program, one utterance at a time."""

    def __init__(self, config: dict = None, which=shutil.which, popen=subprocess.Popen):
        config = config or {}
        self.rate = float(config.get('speech_rate', SPEECH_RATE))
        self.language = config.get('speech_language', SPEECH_LANGUAGE)
        self.voice = config.get('voice')
        self._popen = popen
        self._process = None
        self.command = None
        for executable, build_args in SPEECH_ENGINES:
            path = which(executable)
            if path:
                wpm = int(BASE_WORDS_PER_MINUTE * self.rate)
                self.command = [path] + build_args(wpm, self.language.lower(), self.voice)
                break
        if self.command is None:
            logger.warning("No speech engine found (espeak-ng, espeak or say); narration disabled")

    @property
    def available(self) -> bool:
        return self.command is not None

    def speak(self, text: str) -> None:
        if not self.available:
            return
        self.cancel()
        self._process = self._popen(
            self.command + [text],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL
        )

    def cancel(self) -> None:
        """Stop the utterance in progress, if any."""
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()
        self._process = None


class TerminalNotifier(AudioNotifier):
    """Rings the terminal bell: once for correct, twice for wrong."""

    def __init__(self, stream=None):
        self.stream = stream

    def play(self, kind: str) -> None:
        bell = '\a' if kind == 'correct' else '\a\a'
        print(bell, end='', flush=True, file=self.stream)
