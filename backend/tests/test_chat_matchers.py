import random
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from meditime.chat.faq import match_faq
from meditime.chat.formatter import format_medication, join_natural
from meditime.chat.intent import classify_intent
from meditime.chat.medications import extract_medication_name
from meditime.chat.safety import detect_symptom_advice
from meditime.chat.small_talk import SMALL_TALK_RULES, SingleRandom, match_small_talk
from meditime.chat.text import levenshtein, normalize_full, normalize_light, tokenize
from meditime.chat.topics import match_topic


CATALOG = ["Aspirina", "Ibuprofeno", "Paracetamol", "Warfarina"]


def _record(**overrides):
    data = {
        "name": "Aspirina",
        "presentation": "comprimidos de 500 mg",
        "uses": ["el dolor", "la fiebre"],
        "common_effects": ["náuseas"],
        "adverse_effects": ["sangrado"],
        "interactions": ["warfarina", "ibuprofeno", "alcohol"],
    }
    data.update(overrides)
    return SimpleNamespace(**data)


@pytest.mark.parametrize("value", ["", "a", "aspirina", "¿Qué tal?"])
def test_levenshtein_identity_and_empty(value: str):
    assert levenshtein(value, value) == 0
    assert levenshtein("", value) == len(value)
    assert levenshtein(value, "") == len(value)


def test_levenshtein_known_distances_and_symmetry():
    assert levenshtein("hola", "ola") == 1
    assert levenshtein("gracias", "grasias") == 1
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("asprina", "aspirina") == levenshtein("aspirina", "asprina") == 1


def test_normalizers():
    assert normalize_light("  HoLa  ") == "hola"
    assert normalize_full("¿Qué es la Aspirina?") == "que es la aspirina"
    assert normalize_full("¡Cómo   estás!  ") == "como estas"
    assert tokenize("¿Qué efectos tiene la Warfarina 5mg?") == ["qué", "efectos", "tiene", "la", "warfarina", "mg"]


def test_small_talk_matches_typos_and_variants():
    rng = random.Random(0)
    greeting = next(rule for rule in SMALL_TALK_RULES if rule.name == "greeting")
    assert isinstance(greeting.reply, SingleRandom)

    reply = match_small_talk("Ola!", rng=rng)
    assert reply is not None and len(reply) == 1
    assert reply[0] in greeting.reply.choices

    assert match_small_talk("grasias") is not None
    assert match_small_talk("como estas") == ["Estoy bien, gracias por preguntar. ¿En qué más puedo ayudarte?"]


def test_small_talk_multi_part_and_no_match():
    parts = match_small_talk("como te uso")
    assert parts is not None and len(parts) == 2
    assert parts[0].startswith("Para usarme")

    assert match_small_talk("¿para qué sirve la aspirina?") is None
    assert match_small_talk("   ") is None


def test_small_talk_random_choice_is_reproducible_with_seeded_rng():
    first = match_small_talk("hola", rng=random.Random(42))
    second = match_small_talk("hola", rng=random.Random(42))
    assert first == second


def test_symptom_advice_detection():
    assert detect_symptom_advice("¿Qué tomo para la fiebre?") == (True, "fiebre")
    is_advice, symptom = detect_symptom_advice("puedo tomar algo para el dolor de cabeza")
    assert is_advice is True
    assert "dolor de cabeza" in symptom
    assert detect_symptom_advice("¿Para qué sirve la aspirina?") == (False, "")


def test_topic_context_lifecycle():
    started = match_topic("Tengo un pastillero MediTime", None)
    assert started.active_topic == "pastillero"
    assert started.answer is None

    power = match_topic("¿Funciona con luz?", started.active_topic)
    assert power.active_topic == "pastillero"
    assert "batería" in power.answer

    dropped = match_topic("se me cayó al suelo", power.active_topic)
    assert dropped.active_topic == "pastillero"
    assert "se cae" in dropped.answer

    cleared = match_topic("¿Para qué sirve la aspirina?", dropped.active_topic)
    assert cleared.active_topic is None
    assert cleared.answer is None


def test_topic_rules_ignored_without_active_topic():
    assert match_topic("¿Funciona con luz?", None).answer is None


def test_faq_match_boundaries():
    faqs = [SimpleNamespace(question="¿Qué es la aspirina?", answer="Es un analgésico")]
    assert match_faq("que es la aspirina", faqs) == "Es un analgésico"
    # six and seven trailing insertions
    assert match_faq("que es la aspirina abcde", faqs) == "Es un analgésico"
    assert match_faq("que es la aspirina abcdef", faqs) is None


def test_faq_first_stored_match_wins():
    faqs = [
        SimpleNamespace(question="¿Qué es la aspirina?", answer="primera"),
        SimpleNamespace(question="¿Que es la aspirina?", answer="segunda"),
    ]
    assert match_faq("que es la aspirina", faqs) == "primera"
    assert match_faq("", faqs) is None


def test_medication_extraction_exact_and_fuzzy():
    assert extract_medication_name("¿Para qué sirve el Paracetamol?", CATALOG) == "Paracetamol"
    assert extract_medication_name("tengo dolor y quiero tomar asprina", CATALOG) == "Aspirina"
    assert extract_medication_name("me duele la cabeza", CATALOG) is None


def test_medication_extraction_respects_length_gap():
    # four letters shorter than "aspirina"
    assert extract_medication_name("aspi", CATALOG) is None


@pytest.mark.parametrize(
    "text,intent",
    [
        ("¿Para qué sirve la aspirina?", "usos"),
        ("usos del ibuprofeno", "usos"),
        ("¿y los efectos adversos?", "adversos"),
        ("efectos secundarios de la warfarina", "adversos"),
        ("¿qué efectos comunes tiene?", "efectos"),
        ("presentación del ibuprofeno", "presentacion"),
        ("¿puedo mezclarlo con alcohol?", "interacciones"),
        ("aspirina", "full"),
    ],
)
def test_intent_classification(text: str, intent: str):
    assert classify_intent(text) == intent


def test_join_natural():
    assert join_natural([]) == ""
    assert join_natural(["A"]) == "A"
    assert join_natural(["A", "B", "C"]) == "A, B y C"


def test_format_field_sentences():
    med = _record()
    assert format_medication(med, "usos") == "El Aspirina se usa para el dolor y la fiebre."
    assert format_medication(med, "interacciones") == "No mezcles Aspirina con warfarina, ibuprofeno y alcohol."
    assert format_medication(med, "presentacion") == "El Aspirina se presenta como comprimidos de 500 mg."


def test_format_missing_field_degrades_gracefully():
    med = _record(interactions=[], presentation=None)
    assert format_medication(med, "interacciones") == "No hay registros de interacciones para Aspirina."
    assert format_medication(med, "presentacion") == "No tengo datos de presentación para Aspirina."


def test_format_full_keeps_order_and_skips_empty_fields():
    med = _record(common_effects=[])
    text = format_medication(med, "full")
    lines = text.split("\n")
    assert lines[0] == "¡Hola! Te cuento sobre Aspirina:"
    assert lines[1].startswith("Se presenta como")
    assert lines[2].startswith("Suele utilizarse para")
    assert lines[3].startswith("Atención: puede provocar")
    assert lines[4].startswith("Evita combinarlo con")
    assert "efectos más frecuentes" not in text

    empty = _record(presentation=None, uses=[], common_effects=[], adverse_effects=[], interactions=[])
    assert format_medication(empty, "full").strip()


def test_levenshtein_cutoff_caps_reported_distance():
    assert levenshtein("asprina", "aspirina", 2) == 1
    assert levenshtein("kitten", "sitting", 2) == 3
    assert levenshtein("dolor " * 200, "hola", 2) == 3


def test_matchers_skip_pairs_beyond_length_gap(monkeypatch):
    from meditime.chat import text as text_module

    def fail(*_args, **_kwargs):
        raise AssertionError("distance computed for an out-of-range pair")

    monkeypatch.setattr(text_module, "Levenshtein", SimpleNamespace(distance=fail))
    long_message = "dolor " * 1000
    faqs = [SimpleNamespace(question="¿Qué es la aspirina?", answer="Es un analgésico")]

    assert match_faq(long_message, faqs) is None
    assert match_small_talk(long_message) is None
    assert extract_medication_name("tengo " + "x" * 40, CATALOG) is None
