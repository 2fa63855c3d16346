"""
Centralized prompt file management with fallback templates.
"""
import logging
from typing import Dict

logger = logging.getLogger(__name__)

# Prompt names without language suffix
PROMPT_NAMES = ("classifier", "answer", "combined", "system_classifier", "system_answer", "system_combined")
LANGUAGE_PROMPTS = tuple(f"{name}_{lang}" for name in PROMPT_NAMES for lang in ("hindi", "english"))
REQUIRED_PROMPTS = LANGUAGE_PROMPTS + ("board_scan",)


class PromptManager:
    """Manages prompt file loading with consistent fallback behavior."""

    def __init__(self):
        from core.config import BACKEND_DIR
        self.prompts_dir = BACKEND_DIR / "prompts"
        self.loaded_prompts: Dict[str, str] = {}

        # Fallback templates
        self.fallback_templates = {
            "classifier_hindi": CLASSIFIER_HINDI,
            "classifier_english": CLASSIFIER_ENGLISH,
            "answer_hindi": ANSWER_HINDI,
            "answer_english": ANSWER_ENGLISH,
            "combined_hindi": COMBINED_HINDI,
            "combined_english": COMBINED_ENGLISH,
            "system_classifier_hindi": SYSTEM_CLASSIFIER_HINDI,
            "system_classifier_english": SYSTEM_CLASSIFIER_ENGLISH,
            "system_answer_hindi": SYSTEM_ANSWER_HINDI,
            "system_answer_english": SYSTEM_ANSWER_ENGLISH,
            "system_combined_hindi": SYSTEM_COMBINED_HINDI,
            "system_combined_english": SYSTEM_COMBINED_ENGLISH,
            "board_scan": BOARD_SCAN,
        }

    def get_prompt(self, prompt_name: str) -> str:
        """
        Load prompt by name with fallback.

        Args:
            prompt_name: Name of prompt file (without .txt extension)

        Returns:
            Prompt template string
        """
        # Return cached if already loaded
        if prompt_name in self.loaded_prompts:
            return self.loaded_prompts[prompt_name]

        # Try to load from file
        prompt_file = self.prompts_dir / f"{prompt_name}.txt"

        if prompt_file.exists():
            try:
                template = prompt_file.read_text(encoding="utf-8")

                # Validate not empty
                if not template.strip():
                    raise ValueError(f"Prompt file is empty: {prompt_file}")

                # Cache and return
                self.loaded_prompts[prompt_name] = template
                return template

            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load prompt file {prompt_file}: {e}")
                # Fall through to fallback

        # Use fallback template
        if prompt_name in self.fallback_templates:
            logger.debug(f"Using fallback template for: {prompt_name}")
            template = self.fallback_templates[prompt_name]
            self.loaded_prompts[prompt_name] = template
            return template

        # No fallback available
        raise FileNotFoundError(
            f"Prompt file not found and no fallback available: {prompt_name}.txt. "
            f"Expected at: {prompt_file}"
        )

    def get_language_prompt(self, prompt_name: str, language: str) -> str:
        """Load `<prompt_name>_<language>`, defaulting to English for unknown languages."""
        if language not in ("hindi", "english"):
            language = "english"
        return self.get_prompt(f"{prompt_name}_{language}")


SYSTEM_CLASSIFIER_HINDI = """आप एक लाइव कक्षा के सहायक हैं जो छात्रों के संदेशों को वर्गीकृत करते हैं।
आप उत्तर नहीं देते, केवल वर्गीकरण करते हैं।
JSON keys ENGLISH में ही दें (is_genuine, category, confidence, reason)।
केवल वैध JSON प्रारूप में प्रतिक्रिया दें।"""

SYSTEM_CLASSIFIER_ENGLISH = """You are a live-class assistant that classifies student messages.
You never answer the question, you only classify it.
Respond ONLY in valid JSON format."""

CLASSIFIER_HINDI = """{context_section}पिछले 2 मिनट की कक्षा:
{transcript}

छात्र का संदेश: "{question}"

---

संदेश को इनमें से एक श्रेणी में रखें:

• "noise" - नमस्ते, हाँ, ठीक है, धन्यवाद जैसे शब्द जिनमें कोई प्रश्न नहीं है
• "guidance" - अभी-अभी पढ़ाई गई बात से सीधे जुड़ा प्रश्न (कोई step, संख्या या गणना दोबारा समझनी है)
• "subject_based" - विषय से जुड़ा कोई भी अवधारणा या टॉपिक का प्रश्न

JSON में जवाब दें (KEYS अंग्रेजी में):

{{
    "is_genuine": true/false,
    "category": "noise"/"guidance"/"subject_based",
    "confidence": 0.0-1.0,
    "reason": "हिंदी में छोटा कारण"
}}"""

CLASSIFIER_ENGLISH = """{context_section}CONTEXT (Last 2 minutes class teaching):
{transcript}

Student message: "{question}"

Classify the message into exactly one category:
- "noise": greetings, acknowledgments or filler with no question ("okay", "yes sir", "thank you")
- "guidance": a request about something JUST explained above (repeat a step, a number, a derivation)
- "subject_based": a conceptual or topical question about the subject

JSON FORMAT output:
{{
    "is_genuine": true/false,
    "category": "noise"/"guidance"/"subject_based",
    "confidence": 0.0-1.0,
    "reason": "brief reason in English"
}}"""

SYSTEM_ANSWER_HINDI = """आप मध्य प्रदेश बोर्ड कक्षा 12वीं के विशेषज्ञ शिक्षक हैं।
सीधा प्रसारण कक्षा में विद्यार्थियों के संदेह हल करते हैं।
उत्तर में उचित प्रारूपण उपयोग करें - हर प्रमुख बिंदु के बाद \\n\\n पंक्ति विराम दें।
JSON keys ENGLISH में ही दें (is_genuine, category, reason, answer)।
केवल वैध JSON प्रारूप में प्रतिक्रिया दें।"""

SYSTEM_ANSWER_ENGLISH = """You are an MP Board class 12th expert teacher.
You solve students' doubts in live classes.
Give a properly formatted answer in Hinglish with proper line breaks (\\n\\n).
Respond ONLY in valid JSON format."""

ANSWER_HINDI = """{context_section}पिछले 2 मिनट की कक्षा:
{transcript}

छात्र का प्रश्न: "{question}"{student_line}

---

इस प्रश्न का उत्तर दें।

JSON में जवाब दें (KEYS अंग्रेजी में):

{{
    "is_genuine": true,
    "category": "subject_based",
    "reason": "हिंदी में छोटा कारण",
    "answer": "उत्तर यहाँ"
}}

📝 ढांचा (45-50 शब्द, 5-6 लाइन):
   पहली लाइन: {greeting}
   खाली लाइन: \\n\\n
   बीच की लाइन: मुख्य बात समझाएं
   खाली लाइन: \\n\\n
   आखिरी लाइन: सूत्र या छोटा उदाहरण

❌ न करें: HTML टैग, Markdown (**, ##, -), Bullet points"""

ANSWER_ENGLISH = """{context_section}CONTEXT (Last 2 minutes class teaching):
{transcript}

Student Query: "{question}"{student_line}

Answer this doubt in Hinglish.

JSON FORMAT output:
{{
    "is_genuine": true,
    "category": "subject_based",
    "reason": "brief reason in English",
    "answer": "properly formatted answer with line breaks"
}}

STRUCTURE - Concise answer (5-6 lines, 35-40 words):
   Line 1: {greeting}
   Line 2: Empty line (\\n\\n)
   Line 3: Explain core concept in 1-2 sentences
   Line 4: Empty line (\\n\\n)
   Line 5: Formula or brief example

DON'T USE: HTML tags, markdown symbols (**, ##, etc.), bullet points"""

SYSTEM_COMBINED_HINDI = """आप मध्य प्रदेश बोर्ड कक्षा 12वीं के विशेषज्ञ शिक्षक हैं।
सीधा प्रसारण कक्षा में विद्यार्थियों के संदेह हल करते हैं।
दो कार्य करें:
(1) प्रश्न को वर्गीकृत करें (वास्तविक बनाम शोर)
(2) अगर वास्तविक है तो उचित प्रारूपित उत्तर दें उचित पंक्ति विराम (\\n\\n) के साथ
JSON keys ENGLISH में ही दें (is_genuine, category, confidence, reason, answer)।
केवल वैध JSON प्रारूप में प्रतिक्रिया दें।"""

SYSTEM_COMBINED_ENGLISH = """You are an MP Board class 12th expert teacher.
You solve students' doubts in live classes.
Do two tasks:
(1) classify the query (genuine vs noise)
(2) if genuine, give properly formatted answer in Hinglish with proper line breaks (\\n\\n)
Respond ONLY in valid JSON format."""

COMBINED_HINDI = """{context_section}पिछले 2 मिनट की कक्षा:
{transcript}

छात्र का प्रश्न: "{question}"{student_line}

---

1️⃣ पहले तय करें - यह क्या है?
   • असली प्रश्न (विषय से जुड़ा या मार्गदर्शन चाहिए)
   • शोर (नमस्ते, हाँ, ठीक है जैसे शब्द)

2️⃣ अगर असली प्रश्न है तो उत्तर दें (पहली लाइन: {greeting})

JSON में जवाब दें (KEYS अंग्रेजी में):

{{
    "is_genuine": true/false,
    "category": "subject_doubt"/"guidance"/"noise",
    "confidence": 0.0-1.0,
    "reason": "हिंदी में छोटा कारण",
    "answer": "उत्तर यहाँ" (असली प्रश्न पर ही, नहीं तो null)
}}"""

COMBINED_ENGLISH = """{context_section}CONTEXT (Last 2 minutes class teaching):
{transcript}

Student Query: "{question}"{student_line}

TASK: Do TWO things -
1. Is this genuine doubt? (subject/guidance) or noise? (greetings/random/single words)
2. If genuine, give properly formatted answer in Hinglish (Line 1: {greeting})

JSON FORMAT output:
{{
    "is_genuine": true/false,
    "category": "subject_doubt"/"guidance"/"noise",
    "confidence": 0.0-1.0,
    "reason": "brief reason in English",
    "answer": "properly formatted answer with line breaks" (only if genuine, else null)
}}"""

BOARD_SCAN = """You are analyzing a teaching video frame. The teacher is teaching MP Board Class 12 students.

Look ONLY at the video player area. Ignore application UI such as transcript
panels, chat windows, buttons, headers and token counts.

TASK: Extract and describe what is visible on the BOARD/TEACHING MATERIAL.

Focus on:
1. Main topic/subject being taught
2. All formulas, equations, or mathematical expressions
3. Diagrams, graphs, or visual representations
4. Key concepts, definitions, or terms written
5. Step-by-step solutions or calculations shown

FORMAT YOUR RESPONSE AS:
Topic: [Main topic/chapter]

Content:
- [List all formulas, equations, text visible ON THE BOARD]
- [Include mathematical notation exactly as shown]
- [Describe any diagrams or visual elements]

Keep it concise but complete."""

# Global prompt manager instance
prompt_manager = PromptManager()
