"""
Sample Questions - Built-in question set.

Used when no question file is configured. Deployments are expected to
supply their own file (see bank.py for the format).
"""

from .bank import Question


def _q(question_id: str, text: str, right: str, *wrong: str, image: str | None = None) -> Question:
    return Question(
        question_id=question_id,
        text=text,
        right_answer=right,
        wrong_answers=tuple(wrong),
        image=image,
    )


SAMPLE_QUESTIONS = [
    _q("physics_1", "What is the SI unit of force?",
       "Newton", "Joule", "Pascal", "Watt"),
    _q("physics_2", "Which particle carries a negative electric charge?",
       "Electron", "Proton", "Neutron", "Photon"),
    _q("physics_3", "Approximately how fast does light travel in a vacuum?",
       "300,000 km/s", "150,000 km/s", "30,000 km/s", "3,000,000 km/s"),
    _q("chemistry_1", "What is the chemical symbol for gold?",
       "Au", "Ag", "Gd", "Go"),
    _q("chemistry_2", "Which gas makes up most of Earth's atmosphere?",
       "Nitrogen", "Oxygen", "Carbon dioxide", "Argon"),
    _q("chemistry_3", "What is the pH of pure water at 25 degrees Celsius?",
       "7", "0", "1", "14"),
    _q("biology_1", "Which organelle is known as the powerhouse of the cell?",
       "Mitochondrion", "Nucleus", "Ribosome", "Golgi apparatus"),
    _q("biology_2", "How many chromosomes does a typical human body cell have?",
       "46", "23", "44", "48"),
    _q("astronomy_1", "Which planet is closest to the Sun?",
       "Mercury", "Venus", "Mars", "Earth"),
    _q("astronomy_2", "What is the largest planet in the Solar System?",
       "Jupiter", "Saturn", "Neptune", "Uranus"),
    _q("math_1", "What is the value of pi rounded to two decimal places?",
       "3.14", "3.16", "3.12", "3.41"),
    _q("math_2", "What is the square root of 144?",
       "12", "14", "11", "16"),
]
