"""Console UI for spelldrill application."""

from cli.api_client import NothingToPractice
from core.config import EDITABLE_WORD_FIELDS, MASTERY_GOOD_RATIO
from core.interfaces import AudioNotifier, SpeechNarrator

# Practice prompt commands; spellings never start with ':'
REPEAT_COMMAND = ':repeat'
EXIT_COMMAND = ':exit'


class ConsoleUI:
    """Console user interface for spelldrill application.

    client is a SpelldrillAPIClient or a LocalClient; both return the same
    response dicts.
    """

    def __init__(self, client, narrator: SpeechNarrator, notifier: AudioNotifier, input_func=input):
        self.client = client
        self.narrator = narrator
        self.notifier = notifier
        self.input = input_func

    def ask(self, prompt: str = '==> ') -> str:
        return self.input(prompt).strip()

    def print_profile(self, profile: dict):
        """Print the student profile card."""
        print('=' * 40)
        print('STUDENT PROFILE')
        print(f"  {profile['name']}")
        print(f"  Class: {profile['s_class'] or '-'} | No.: {profile['class_num'] or '-'}")
        print('=' * 40)

    def print_lists(self, lists: list[dict]):
        print('\nMY WORD LISTS')
        if not lists:
            print('  No lists yet. Create one with: new <title>')
            return
        for i, word_list in enumerate(lists, 1):
            line = f"  {i}. {word_list['title']} ({word_list['word_count']} words)"
            mastery = word_list['mastery']
            if mastery['total'] > 0:
                marker = '+' if word_list['mastery_strong'] else '!'
                line += f" [{marker}] Mastery: {mastery['correct']}/{mastery['total']}"
            print(line)

    def print_words(self, word_list: dict):
        print('\n' + '=' * 60)
        print(f"{word_list['title']} ({len(word_list['words'])} words)")
        print('=' * 60)
        for i, word in enumerate(word_list['words'], 1):
            print(f"  {i}. {word['text']} ({word['part_of_speech']}) - {word['definition']}")
            print(f"     {word['example_sentence']}")
        print('=' * 60)

    def edit_profile(self, current: dict = None) -> None:
        current = current or {'name': '', 's_class': '', 'class_num': ''}
        while True:
            name = self.ask(f"Name [{current['name']}]: ") or current['name']
            s_class = self.ask(f"Class (e.g. 3A) [{current['s_class']}]: ") or current['s_class']
            class_num = self.ask(f"Class No. [{current['class_num']}]: ") or current['class_num']
            result = self.client.save_profile(name, s_class, class_num)
            if result['success']:
                return
            print(f"Error: {result['error']}")

    def play_cues(self, cues: list[dict]):
        for cue in cues:
            if cue['type'] == 'speak':
                self.narrator.speak(cue['text'])
            elif cue['type'] == 'play':
                self.notifier.play(cue['kind'])
            elif cue['type'] == 'round_complete':
                print('\n*** Round 1 Complete! Now retrying the words you missed. ***')

    def print_prompt(self, data: dict):
        word = data['current_word']
        title = 'Retry Mistakes' if data['round'] == 'retry' else 'Round 1'
        progress = data['progress']
        print('\n' + '-' * 40)
        print(f"Practice Mode ({title}) | Word {progress['index'] + 1} of {progress['length']}")
        print(f"  {word['definition']}")
        print(f"  ({word['part_of_speech']})")
        print('-' * 40)

    def print_feedback(self, data: dict):
        if data['feedback'] == 'correct':
            print('Correct!')
        elif data['feedback'] == 'incorrect':
            print(f"Correct spelling: {data['current_word']['text']}")
            print('Moving to next word...')

    def practice(self, list_id: str):
        """Run one practice session on a list."""
        try:
            data = self.client.start_practice(list_id)
        except NothingToPractice:
            print('This list has no words yet. Add some first.')
            return

        print('Type the word you hear. Commands: ":repeat" to listen again, ":exit" to stop.')
        while True:
            self.play_cues(data['cues'])

            if data['result']:
                result = data['result']
                print(f"\nPractice complete! Mastery: {result['correct']}/{result['total']}")
                if result['total'] and result['correct'] / result['total'] > MASTERY_GOOD_RATIO:
                    print('Great work!')
                return

            if not data['active']:
                return

            if data['pending_ms'] is not None:
                self.client.wait(data['pending_ms'])
                data = self.client.get_practice(list_id)
                continue

            self.print_prompt(data)
            answer = ''
            while not answer:
                answer = self.ask()
                if answer.lower() == EXIT_COMMAND:
                    print('Leaving practice. This session will not be recorded.')
                    return
                if answer.lower() == REPEAT_COMMAND:
                    self.play_cues(self.client.repeat_word(list_id)['cues'])
                    answer = ''

            data = self.client.submit_answer(list_id, answer)
            self.print_feedback(data)

    def add_word(self, list_id: str, text: str):
        definition = self.ask('Definition (blank for placeholder): ') or None
        part_of_speech = self.ask('Part of speech (blank for placeholder): ') or None
        sentence = self.ask('Example sentence (blank for placeholder): ') or None
        result = self.client.add_word(list_id, text, definition, part_of_speech, sentence)
        if not result['success']:
            print(f"Error: {result['error']}")

    def edit_word(self, list_id: str, word: dict):
        print(f"Fields: {', '.join(EDITABLE_WORD_FIELDS)}")
        field = self.ask('Field: ')
        if field not in EDITABLE_WORD_FIELDS:
            print('Unknown field.')
            return
        value = self.ask(f"New {field} [{word[field]}]: ")
        if value:
            self.client.update_word(list_id, word['id'], field, value)

    def pick(self, items: list, arg: str):
        """Return items[n-1] for a 1-based number in arg, or None."""
        if arg.isdigit() and 1 <= int(arg) <= len(items):
            return items[int(arg) - 1]
        print('Invalid number.')
        return None

    def list_menu(self, list_id: str):
        """Show one list and handle its commands until 'back'."""
        while True:
            word_list = self.client.get_word_list(list_id)
            self.print_words(word_list)
            print('Commands: add <word>, del <n>, edit <n>, say <n>, practice, back')
            command, _, arg = self.ask().partition(' ')
            command = command.lower()
            arg = arg.strip()

            if command == 'back':
                return
            elif command == 'add' and arg:
                self.add_word(list_id, arg)
            elif command == 'del':
                word = self.pick(word_list['words'], arg)
                if word:
                    self.client.delete_word(list_id, word['id'])
            elif command == 'edit':
                word = self.pick(word_list['words'], arg)
                if word:
                    self.edit_word(list_id, word)
            elif command == 'say':
                word = self.pick(word_list['words'], arg)
                if word:
                    self.narrator.speak(word['text'])
            elif command == 'practice':
                self.practice(list_id)
            elif command:
                print('Unknown command.')

    def run(self):
        """Run the main application loop."""
        # Check server connection
        try:
            health = self.client.health_check()
            print(f"Connected to spelldrill ({health['service']})")
        except Exception as e:
            print(f"Error: Cannot connect to server at {self.client.base_url}: {e}")
            print("Make sure the server is running: python run_server.py")
            return

        profile = self.client.get_profile()
        if not profile['complete']:
            print('Welcome! Set up your student profile first.')
            self.edit_profile()

        while True:
            self.print_profile(self.client.get_profile()['profile'])
            lists = self.client.list_word_lists()
            self.print_lists(lists)
            print('Commands: <n> open list, new <title>, delete <n>, profile, exit')
            command, _, arg = self.ask().partition(' ')
            arg = arg.strip()

            if command.lower() == 'exit':
                print('Goodbye!')
                return
            elif command.isdigit():
                word_list = self.pick(lists, command)
                if word_list:
                    self.list_menu(word_list['id'])
            elif command.lower() == 'new':
                result = self.client.create_word_list(arg)
                if not result['success']:
                    print(f"Error: {result['error']}")
            elif command.lower() == 'delete':
                word_list = self.pick(lists, arg)
                if word_list and self.ask(f"Delete '{word_list['title']}'? (y/n) ").lower() == 'y':
                    self.client.delete_word_list(word_list['id'])
            elif command.lower() == 'profile':
                self.edit_profile(self.client.get_profile()['profile'])
            elif command:
                print('Unknown command.')
