"""A growable array and a live stock price dashboard."""