def roll(n):
    """A valid roll number, distinct for 0 <= n < 100."""
    return f'21091A05{n // 10}{n % 10}'
