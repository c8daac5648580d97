"""Squashed alphabets with known decoding counts."""

# 41 decodings.
AMBIGUOUS = "......-..--...---.-....---...--....--.-..---.....---.-.---..---.-....--.-.---.-.--"
AMBIGUOUS_COUNT = 41

# Exactly one decoding.
UNIQUE = "---...--..-...---.--........-...-.--.-.....-....-.---..--..------.------....---..."
UNIQUE_DECODING = "mdplwkbhruacifsyxnjtqogvze"

# 8574 decodings, among them the permutation that produced it.
WIRNBF = "wirnbfzehatqlojpgcvusyxkmd"
WIRNBF_SQUASHED = ".--...-.-.-.....-.--........----.-.-..---.---.--.--.-.-....-..-...-.---..--.----.."
WIRNBF_COUNT = 8574
