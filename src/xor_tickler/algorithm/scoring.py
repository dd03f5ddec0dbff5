from xor_tickler.config import ENG_LETTER_SCORES, UNSCORED_PENALTY


def score_english(text: bytes) -> int:
    """ Reward common English letters and penalize every other byte. """
    score = 0
    for byte in text:
        letter_score = ENG_LETTER_SCORES.get(byte)
        if letter_score is None:
            score -= UNSCORED_PENALTY
        else:
            score += letter_score
    return score
