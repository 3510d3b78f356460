"""Generate an example .ini file to see what the writer produces."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from ceini.reader import read
from ceini.spec import escape_value, needs_quoting
from ceini.writer import OutputBuffer, write


class Settings:
    """Options stored per key, handed to the writer through an accessor."""

    def __init__(self):
        self._rows = []

    def set(self, section, name, value):
        if needs_quoting(value):
            value = escape_value(value)
        self._rows.append((section, name, value))

    def __len__(self):
        return len(self._rows)

    def get(self, index):
        return self._rows[index]


settings = Settings()
settings.set("server", "host", "127.0.0.1")
settings.set("database", "url", "postgres://db:5432/app")
settings.set("server", "port", "8080")
settings.set("server", "motd", "  Welcome, be nice  ")
settings.set("logging", "level", "debug")
settings.set("database", "pool.size", "10")

buffer = OutputBuffer(1024)
write(buffer, len(settings), settings.get)
text = buffer.getvalue()

# Write the example
output = __import__("pathlib").Path(__file__).parent / "hello.ini"
output.write_text(text, encoding="utf-8")
print(f"Generated {output} ({len(text)} bytes)")

# Also print the raw content so you can see the format
print()
print("=" * 60)
print("RAW .ini FILE CONTENTS:")
print("=" * 60)
print()
print(text)

print("=" * 60)
print("READ BACK:")
print("=" * 60)
for option in read(text):
    print(f"  [{option.section}] {option.name} = {option.value!r}")
