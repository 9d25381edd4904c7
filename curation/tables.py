"""Default rule tables for scoring and recategorization.

All tables are ordered data; :class:`curation.config.RuleTables` compiles them
and YAML configs may replace any of them wholesale.
"""

from __future__ import annotations

from typing import List, Tuple

# Characters that count as "word" material: ASCII word chars plus hiragana,
# katakana and CJK ideographs.
WORD_CHARS = r"A-Za-z0-9_\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF"

TECHNICAL_TERMS: List[str] = [
    # AI / ML
    "AI", "ML", "ディープラーニング", "機械学習", "人工知能", "CNN", "RNN", "LSTM", "GAN", "Transformer",
    # programming
    "JavaScript", "Python", "Java", "TypeScript", "React", "Vue", "Angular", "Node.js", "Express",
    # system / architecture
    "API", "REST", "GraphQL", "マイクロサービス", "アーキテクチャ", "フレームワーク", "ライブラリ",
    # data / databases
    "データベース", "SQL", "NoSQL", "MongoDB", "Redis", "PostgreSQL", "MySQL",
    # cloud / infra
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "DevOps", "CI/CD",
]

TECHNICAL_PATTERNS: List[str] = [
    r"(?i)(API|Framework|Library)$",
    r"^[A-Z]{2,}$",
    r"(?i)(-based|-driven|-oriented)$",
    r"(システム|アルゴリズム|プロトコル)$",
]

NOISE_PATTERNS: List[str] = [
    # overly generic words
    r"^(こと|もの|これ|それ|あれ|ここ|そこ|あそこ|ため|場合|時|際|様々|数々|人々)$",
    r"^(it|this|that|these|those|thing|things|stuff|something|we|they|you)$",
    # particles and polite forms
    r"^(です|である|ます|ません|でしょう|いたします)$",
    # single character, or nothing but symbols
    r"^.$|^[^" + WORD_CHARS + r"]+$",
    # digits only
    r"^[0-9]+$",
]

# One character outside WORD_CHARS.
SYMBOL_PATTERN = r"[^" + WORD_CHARS + r"]"

# Hiragana-only names this short are most likely particles.
LOW_INFO_PATTERN = r"^[\u3040-\u309F]+$"
LOW_INFO_MAX_LENGTH = 3

MIXED_SCRIPT_PAIRS: List[Tuple[str, str]] = [
    (r"[\u4E00-\u9FAF]", r"[\u30A0-\u30FF]"),
    (r"[A-Za-z]", r"[\u3040-\u30FF\u4E00-\u9FAF]"),
]

CAMEL_OR_ACRONYM_PATTERN = r"[a-z][A-Z]|[A-Z]{2,}"
COMPOUND_PATTERN = r"[-.]"

CATEGORY_RULES: List[Tuple[str, str]] = [
    ("artificial_intelligence", r"(?i)AI|ML|機械学習|ディープラーニング|人工知能|neural|learning|intelligence"),
    ("programming", r"(?i)JavaScript|Python|Java|React|Vue|Angular|Framework|Library|API"),
    ("system_architecture", r"(?i)システム|アーキテクチャ|database|server|cloud|docker|kubernetes"),
    ("data_science", r"(?i)データ|database|SQL|analytics|analysis"),
    ("methodology", r"(?i)手法|アプローチ|概念|理論|method|approach|concept"),
    ("business", r"(?i)ビジネス|プロジェクト|管理|business|management|project"),
]

SURFACE_CATEGORIES: Tuple[str, ...] = ("technology", "programming")
