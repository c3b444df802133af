from semences.adapters.insights import APERCUS, gerer_apercus, parse_apercus


def test_generator_returns_segments_separated_by_blank_line():
    text = gerer_apercus({"couverture_globale": 4.7}, delay=0)
    assert text.count("\n\n") == len(APERCUS) - 1


def test_parse_generated_text():
    parsed = parse_apercus(gerer_apercus({}, delay=0))
    assert [t for t, _ in parsed] == ["Alerte stock bas", "Opportunité d'optimisation", "Contrôle Qualité Requis"]
    assert parsed[0][1].startswith("La demande pour le Cèdre de l'Atlas")


def test_parse_segment_without_title():
    parsed = parse_apercus("**Titre** : corps\n\nTexte libre sans titre\n\n")
    assert parsed == [("Titre", "corps"), (None, "Texte libre sans titre")]


def test_parse_empty_text():
    assert parse_apercus("") == []
    assert parse_apercus(None) == []


def test_generator_simulated_delay(monkeypatch):
    from semences.adapters import insights

    waits = []
    monkeypatch.setattr(insights.time, "sleep", lambda s: waits.append(s))
    gerer_apercus({}, delay=1.5)
    assert waits == [1.5]
