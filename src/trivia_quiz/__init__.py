"""Terminal trivia quiz backed by the Open Trivia DB question bank."""
