"""Configuration constants for spelldrill application."""

# Auto-advance pauses (milliseconds). Keep the 1:2 ratio between them.
CORRECT_PAUSE_MS = 1500
INCORRECT_PAUSE_MS = 3000

# Narration timing
NARRATION_DELAY_MS = 500       # Delay before the first word is spoken
ROUND_COMPLETE_DELAY_MS = 100  # Delay before announcing the retry round

# Mastery display
MASTERY_GOOD_RATIO = 0.8  # Ratios above this are shown as strong

# Speech
SPEECH_LANGUAGE = 'en-US'
SPEECH_RATE = 0.85

# Word placeholders (no dictionary lookups are performed)
DEFAULT_DEFINITION = '請輸入中文解釋'
DEFAULT_PART_OF_SPEECH = 'n./v.'
DEFAULT_SENTENCE_TEMPLATE = "Please add a sentence for '{word}'."

EDITABLE_WORD_FIELDS = ('text', 'definition', 'part_of_speech', 'example_sentence')

# Student profile
PROFILE_FIELDS = ('name', 's_class', 'class_num')

# Storage
DEFAULT_STORAGE = 'file'
CONFIG_FILE = '~/.config/spelldrill/config.json'
