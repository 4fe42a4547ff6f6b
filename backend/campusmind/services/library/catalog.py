"""
Curated open-textbook catalog.

Read-only data built once at import: library categories with their
matching keywords, the textbooks filed under each category, and career
profiles grouping several categories. Keywords may carry accents; the
matcher normalizes both sides.
"""
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from campusmind.schemas import AcademicResource, AcademicSource, Career, LibraryCategory, ResourceType

OPENSTAX_DETAILS = "https://openstax.org/details/books/"
OPENSTAX_LICENSE = "CC BY 4.0"
CATALOG_SOURCE = AcademicSource.OER_COMMONS.value


def _book(slug: str, title: str, year: int, subjects: Sequence[str], pages: int) -> AcademicResource:
    return AcademicResource(
        external_id=f"openstax-{slug}",
        source=CATALOG_SOURCE,
        title=title,
        authors=["OpenStax"],
        abstract=f"{title}: free, peer-reviewed open textbook from OpenStax.",
        publication_date=str(year),
        type=ResourceType.BOOK,
        subjects=subjects,
        url=f"{OPENSTAX_DETAILS}{slug}",
        is_open_access=True,
        license=OPENSTAX_LICENSE,
        publisher="OpenStax",
        page_count=pages,
        language="en",
    )


ANATOMY_PHYSIOLOGY = _book("anatomy-and-physiology-2e", "Anatomy and Physiology 2e", 2022, ("anatomy", "physiology"), 1335)
BIOLOGY = _book("biology-2e", "Biology 2e", 2018, ("biology", "genetics"), 1472)
CONCEPTS_BIOLOGY = _book("concepts-biology", "Concepts of Biology", 2013, ("biology",), 633)
MICROBIOLOGY = _book("microbiology", "Microbiology", 2016, ("microbiology", "immunology"), 1301)
CHEMISTRY = _book("chemistry-2e", "Chemistry 2e", 2019, ("chemistry",), 1341)
ORGANIC_CHEMISTRY = _book("organic-chemistry", "Organic Chemistry", 2023, ("chemistry", "biochemistry"), 1449)
PSYCHOLOGY = _book("psychology-2e", "Psychology 2e", 2020, ("psychology",), 753)
LIFESPAN_DEVELOPMENT = _book("lifespan-development", "Lifespan Development", 2022, ("psychology", "development"), 618)
STATISTICS = _book("introductory-statistics-2e", "Introductory Statistics 2e", 2023, ("statistics",), 902)
CALCULUS_1 = _book("calculus-volume-1", "Calculus Volume 1", 2016, ("calculus", "mathematics"), 873)
CALCULUS_2 = _book("calculus-volume-2", "Calculus Volume 2", 2016, ("calculus", "mathematics"), 823)
UNIVERSITY_PHYSICS = _book("university-physics-volume-1", "University Physics Volume 1", 2016, ("physics", "mechanics"), 1014)
COLLEGE_PHYSICS = _book("college-physics-2e", "College Physics 2e", 2022, ("physics",), 1664)
PYTHON = _book("introduction-python-programming", "Introduction to Python Programming", 2024, ("programming", "python"), 431)
DATA_SCIENCE = _book("principles-data-science", "Principles of Data Science", 2024, ("data science", "statistics"), 605)
FUNDAMENTALS_NURSING = _book("fundamentals-nursing", "Fundamentals of Nursing", 2024, ("nursing",), 1082)
MEDICAL_SURGICAL_NURSING = _book("medical-surgical-nursing", "Medical-Surgical Nursing", 2024, ("nursing",), 1336)
PHARMACOLOGY = _book("pharmacology", "Pharmacology for Nurses", 2024, ("pharmacology", "nursing"), 820)
NUTRITION = _book("nutrition", "Nutrition for Nurses", 2024, ("nutrition",), 624)
POPULATION_HEALTH = _book("population-health", "Population Health for Nurses", 2024, ("public health",), 714)


CATEGORIES: Tuple[LibraryCategory, ...] = (
    LibraryCategory(
        id="anatomy",
        description="Human anatomy and physiology",
        keywords=("anatomía", "anatomy", "fisiología", "physiology", "cuerpo humano", "morfología", "histología"),
    ),
    LibraryCategory(
        id="biomechanics",
        description="Movement mechanics, kinesiology and exercise science",
        keywords=("biomecánica", "biomechanics", "kinesiología", "kinesiology", "movimiento", "ejercicio", "kinesiterapia"),
    ),
    LibraryCategory(
        id="biology",
        description="General, cell and molecular biology",
        keywords=("biología", "biology", "célula", "celular", "genética", "genetics", "evolución"),
    ),
    LibraryCategory(
        id="microbiology",
        description="Microorganisms, infection and immunity",
        keywords=("microbiología", "microbiology", "bacteriología", "virología", "inmunología", "infectología", "parasitología"),
    ),
    LibraryCategory(
        id="chemistry",
        description="General, organic and biological chemistry",
        keywords=("química", "chemistry", "bioquímica", "biochemistry", "orgánica", "organic"),
    ),
    LibraryCategory(
        id="pharmacology",
        description="Drugs, dosage and therapeutics",
        keywords=("farmacología", "pharmacology", "fármacos", "terapéutica", "toxicología"),
    ),
    LibraryCategory(
        id="nursing",
        description="Nursing fundamentals and clinical care",
        keywords=("enfermería", "nursing", "cuidados", "médico quirúrgico", "clínica", "semiología"),
    ),
    LibraryCategory(
        id="nutrition",
        description="Human nutrition and dietetics",
        keywords=("nutrición", "nutrition", "dietética", "alimentación", "dietoterapia"),
    ),
    LibraryCategory(
        id="public_health",
        description="Epidemiology and population health",
        keywords=("salud pública", "public health", "epidemiología", "epidemiology", "salud comunitaria"),
    ),
    LibraryCategory(
        id="psychology",
        description="Psychology and human development",
        keywords=("psicología", "psychology", "desarrollo humano", "conducta", "psicopatología", "neuropsicología"),
    ),
    LibraryCategory(
        id="statistics",
        description="Statistics and data analysis",
        keywords=("estadística", "statistics", "bioestadística", "probabilidad", "ciencia de datos", "data science"),
    ),
    LibraryCategory(
        id="calculus",
        description="Calculus and mathematical analysis",
        keywords=("cálculo", "calculus", "matemática", "álgebra", "análisis matemático", "ecuaciones diferenciales"),
    ),
    LibraryCategory(
        id="physics",
        description="Classical and applied physics",
        keywords=("física", "physics", "mecánica", "mechanics", "termodinámica", "electromagnetismo"),
    ),
    LibraryCategory(
        id="programming",
        description="Programming and introductory computer science",
        keywords=("programación", "programming", "python", "algoritmos", "computación", "informática"),
    ),
)

TEXTBOOKS: Mapping[str, Tuple[AcademicResource, ...]] = MappingProxyType({
    "anatomy": (ANATOMY_PHYSIOLOGY,),
    "biomechanics": (UNIVERSITY_PHYSICS, ANATOMY_PHYSIOLOGY),
    "biology": (BIOLOGY, CONCEPTS_BIOLOGY),
    "microbiology": (MICROBIOLOGY,),
    "chemistry": (CHEMISTRY, ORGANIC_CHEMISTRY),
    "pharmacology": (PHARMACOLOGY,),
    "nursing": (FUNDAMENTALS_NURSING, MEDICAL_SURGICAL_NURSING),
    "nutrition": (NUTRITION,),
    "public_health": (POPULATION_HEALTH, STATISTICS),
    "psychology": (PSYCHOLOGY, LIFESPAN_DEVELOPMENT),
    "statistics": (STATISTICS, DATA_SCIENCE),
    "calculus": (CALCULUS_1, CALCULUS_2),
    "physics": (COLLEGE_PHYSICS, UNIVERSITY_PHYSICS),
    "programming": (PYTHON, DATA_SCIENCE),
})

CAREERS: Tuple[Career, ...] = (
    Career(
        id="kinesiology",
        name="Kinesiología",
        description="Movimiento humano, rehabilitación y ejercicio terapéutico",
        icon="activity",
        gradient="from-emerald-500 to-teal-500",
        categories=("anatomy", "biomechanics", "physics", "psychology"),
        keywords=("kinesiología", "kinesiology", "kinesiólogo", "rehabilitación", "fisioterapia", "terapia física"),
    ),
    Career(
        id="medicine",
        name="Medicina",
        description="Ciencias básicas y clínicas para la formación médica",
        icon="stethoscope",
        gradient="from-red-500 to-rose-500",
        categories=("anatomy", "biology", "microbiology", "chemistry", "pharmacology", "public_health"),
        keywords=("medicina", "medicine", "médico", "patología", "clínica médica", "cirugía"),
    ),
    Career(
        id="nursing",
        name="Enfermería",
        description="Cuidado del paciente, procedimientos y farmacología clínica",
        icon="heart-pulse",
        gradient="from-pink-500 to-fuchsia-500",
        categories=("nursing", "pharmacology", "anatomy", "nutrition", "public_health"),
        keywords=("enfermería", "nursing", "enfermero", "enfermera", "cuidados"),
    ),
    Career(
        id="nutrition",
        name="Nutrición y Dietética",
        description="Alimentación, metabolismo y salud poblacional",
        icon="apple",
        gradient="from-lime-500 to-green-500",
        categories=("nutrition", "chemistry", "biology", "public_health"),
        keywords=("nutrición", "nutrition", "nutricionista", "dietética", "metabolismo"),
    ),
    Career(
        id="psychology",
        name="Psicología",
        description="Conducta, procesos mentales y desarrollo humano",
        icon="brain",
        gradient="from-violet-500 to-purple-500",
        categories=("psychology", "statistics", "biology"),
        keywords=("psicología", "psychology", "psicólogo", "salud mental", "mental"),
    ),
    Career(
        id="engineering",
        name="Ingeniería",
        description="Matemática, física y fundamentos de ingeniería",
        icon="cog",
        gradient="from-amber-500 to-orange-500",
        categories=("calculus", "physics", "chemistry", "statistics", "programming"),
        keywords=("ingeniería", "engineering", "ingeniero", "civil", "industrial"),
    ),
    Career(
        id="computer_science",
        name="Ingeniería en Computación",
        description="Programación, algoritmos y ciencia de datos",
        icon="code",
        gradient="from-sky-500 to-blue-500",
        categories=("programming", "calculus", "statistics"),
        keywords=("computación", "computer science", "software", "sistemas", "desarrollo web", "inteligencia artificial"),
    ),
)
