MIN_DONOR_AGE = 18
MIN_DONOR_WEIGHT_KG = 60


def evaluate(age, weight_kg):
    """Return True if a donor of this age and weight may give blood. Both bounds are inclusive."""
    return age >= MIN_DONOR_AGE and weight_kg >= MIN_DONOR_WEIGHT_KG
