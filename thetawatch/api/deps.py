from thetawatch.services.suggestion import SuggestionAdjuster, get_suggestion_adjuster


def get_adjuster() -> SuggestionAdjuster:
    return get_suggestion_adjuster()
