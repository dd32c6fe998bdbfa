"""Localized canned content for the offline mock provider."""

from __future__ import annotations

INTENTS = (
    "generic",
    "document_assistance",
    "appointment_planning",
    "immigration_support",
    "financial_advice",
)

# Keyword patterns checked in order; first match wins
INTENT_PATTERNS: tuple[tuple[str, str], ...] = (
    ("document_assistance", r"document|paper|form|attachment|translation"),
    ("appointment_planning", r"appointment|schedule|booking|slot"),
    ("immigration_support", r"visa|immigration|residency|permit"),
    ("financial_advice", r"tax|finance|budget|invoice|statement"),
)

INTENT_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "generic": "support with your request",
        "document_assistance": "help preparing your documents",
        "appointment_planning": "support scheduling an appointment",
        "immigration_support": "guidance for immigration and residency matters",
        "financial_advice": "support with tax or financial questions",
    },
    "fr": {
        "generic": "un accompagnement pour votre demande",
        "document_assistance": "de l’aide pour préparer vos documents",
        "appointment_planning": "un accompagnement pour planifier un rendez-vous",
        "immigration_support": "des conseils sur les démarches d'immigration et de résidence",
        "financial_advice": "un accompagnement pour vos questions fiscales ou financières",
    },
    "ar": {
        "generic": "دعم لطلبك",
        "document_assistance": "مساعدة في إعداد المستندات",
        "appointment_planning": "دعم في حجز المواعيد",
        "immigration_support": "إرشاد حول الهجرة والإقامة",
        "financial_advice": "دعم في الأسئلة الضريبية أو المالية",
    },
}

CHAT_TEMPLATES: dict[str, dict[str, str]] = {
    "en": {
        "opening": "Thank you for the context. I understand you need {intent}.",
        "default_prompt": (
            "Please share any additional details and I will guide you through the next steps."
        ),
        "snippet": 'You mentioned "{snippet}".',
        "closing": "Here is how we can move forward together.",
    },
    "fr": {
        "opening": "Merci pour ces informations. Je comprends que vous avez besoin de {intent}.",
        "default_prompt": (
            "N’hésitez pas à partager plus de détails, je vous accompagne pour définir "
            "les prochaines étapes."
        ),
        "snippet": "Vous avez précisé « {snippet} ».",
        "closing": "Voici comment nous pouvons avancer ensemble.",
    },
    "ar": {
        "opening": "شكرًا لك على المعلومات. أفهم أنك تحتاج إلى {intent}.",
        "default_prompt": "يرجى مشاركة أي تفاصيل إضافية وسأرشدك إلى الخطوات التالية.",
        "snippet": 'ذكرت "{snippet}".',
        "closing": "إليك كيفية المتابعة معًا.",
    },
}

# (title, summary, slug, confidence)
SUGGESTIONS: dict[str, dict[str, list[tuple[str, str, str, float]]]] = {
    "en": {
        "generic": [
            ("Discovery consultation",
             "Schedule a 30-minute call to review your situation and outline tailored next steps.",
             "discovery-consultation", 0.72),
            ("Document preparation review",
             "Have a specialist validate that your paperwork is complete before submission.",
             "document-preparation-review", 0.64),
            ("Follow-up support session",
             "Book a follow-up to answer outstanding questions and confirm requirements.",
             "follow-up-support-session", 0.58),
        ],
        "document_assistance": [
            ("Document review consultation",
             "Work with a specialist to review forms, evidence, and translations ahead of submission.",
             "document-review-consultation", 0.86),
            ("Certified translation support",
             "Coordinate certified translations and legalization for official paperwork.",
             "certified-translation-support", 0.82),
            ("Submission checklist session",
             "Receive a tailored checklist covering the documents you need to prepare.",
             "submission-checklist-session", 0.78),
        ],
        "appointment_planning": [
            ("Priority appointment booking",
             "Let our coordination team secure the earliest available slot for your case.",
             "priority-appointment-booking", 0.8),
            ("Preparation call with specialist",
             "Review the agenda and documents required before you meet with the agency.",
             "appointment-preparation-call", 0.69),
            ("Reminder & follow-up package",
             "Receive reminders, checklists, and post-appointment follow-up support.",
             "appointment-reminder-package", 0.62),
        ],
        "immigration_support": [
            ("Immigration strategy session",
             "Build a personalized immigration plan with a licensed specialist.",
             "immigration-strategy-session", 0.88),
            ("Residency eligibility review",
             "Verify eligibility requirements and documentation for your target residency program.",
             "residency-eligibility-review", 0.82),
            ("Application readiness checklist",
             "Confirm that your dossier meets official standards before you submit it.",
             "application-readiness-checklist", 0.74),
        ],
        "financial_advice": [
            ("Tax consultation",
             "Meet with a tax specialist to clarify declarations and optimize your strategy.",
             "tax-consultation", 0.83),
            ("Financial compliance review",
             "Ensure your financial documentation meets regulatory requirements.",
             "financial-compliance-review", 0.78),
            ("Budget planning workshop",
             "Create a tailored budget covering fees, timelines, and documentation costs.",
             "budget-planning-workshop", 0.66),
        ],
    },
    "fr": {
        "generic": [
            ("Consultation découverte",
             "Planifiez un entretien de 30 minutes pour analyser votre situation et définir "
             "les prochaines étapes.",
             "consultation-decouverte", 0.7),
            ("Revue de préparation des documents",
             "Faites valider vos documents par un spécialiste avant leur dépôt.",
             "revue-preparation-documents", 0.63),
            ("Session de suivi",
             "Prenez un rendez-vous de suivi pour répondre aux questions restantes.",
             "session-suivi", 0.57),
        ],
        "document_assistance": [
            ("Consultation de vérification des documents",
             "Analyse détaillée des formulaires et pièces justificatives avec un spécialiste.",
             "consultation-verification-documents", 0.85),
            ("Aide à la traduction certifiée",
             "Organisation des traductions certifiées et de la légalisation des documents.",
             "aide-traduction-certifiee", 0.8),
            ("Checklist personnalisée",
             "Recevez une checklist adaptée aux documents à réunir.",
             "checklist-personnalisee", 0.76),
        ],
        "appointment_planning": [
            ("Prise de rendez-vous prioritaire",
             "Notre équipe s'occupe de trouver le créneau le plus rapide pour votre dossier.",
             "prise-rendez-vous-prioritaire", 0.78),
            ("Préparation au rendez-vous",
             "Révision de l'ordre du jour et des pièces à présenter avant votre rendez-vous.",
             "preparation-rendez-vous", 0.68),
            ("Pack rappels & suivi",
             "Recevez des rappels, des checklists et un suivi après votre rendez-vous.",
             "pack-rappels-suivi", 0.6),
        ],
        "immigration_support": [
            ("Session stratégie immigration",
             "Construisez un plan personnalisé avec un expert agréé.",
             "session-strategie-immigration", 0.87),
            ("Vérification d’éligibilité",
             "Analyse des critères et pièces requis pour votre programme de résidence.",
             "verification-eligibilite", 0.81),
            ("Préparation du dossier",
             "Assurez-vous que votre dossier est complet avant dépôt.",
             "preparation-dossier", 0.73),
        ],
        "financial_advice": [
            ("Consultation fiscale",
             "Entretien avec un spécialiste pour clarifier vos obligations.",
             "consultation-fiscale", 0.82),
            ("Audit de conformité financière",
             "Vérifiez que vos documents financiers respectent la réglementation.",
             "audit-conformite-financiere", 0.76),
            ("Atelier budget",
             "Élaborez un budget sur-mesure pour vos démarches.",
             "atelier-budget", 0.65),
        ],
    },
    "ar": {
        "generic": [
            ("استشارة تمهيدية",
             "احجز جلسة لمدة 30 دقيقة لمراجعة وضعك وتحديد الخطوات التالية.",
             "istishara-tamhidiya", 0.69),
            ("مراجعة إعداد المستندات",
             "دع الأخصائي يتحقق من اكتمال مستنداتك قبل تقديمها.",
             "murajaea-almustanadat", 0.6),
            ("جلسة متابعة",
             "حدد جلسة متابعة للإجابة عن الأسئلة المتبقية.",
             "jalasat-mutabaea", 0.55),
        ],
        "document_assistance": [
            ("استشارة مراجعة المستندات",
             "مراجعة متخصصة للنماذج والمرفقات قبل التقديم.",
             "istishara-murajaeat-almustanadat", 0.84),
            ("دعم الترجمة المعتمدة",
             "تنسيق الترجمات المعتمدة وتصديق المستندات الرسمية.",
             "daem-altarjama-almuetamida", 0.79),
            ("قائمة تحقق مخصصة",
             "احصل على قائمة مخصصة بالمستندات المطلوبة.",
             "qaimat-tahaqquq-mukhasasa", 0.75),
        ],
        "appointment_planning": [
            ("حجز موعد أولوية",
             "نساعدك في الحصول على أقرب موعد مناسب لملفك.",
             "hajz-mawead-awlawiya", 0.77),
            ("جلسة تحضير للموعد",
             "مراجعة ما يجب تحضيره قبل حضورك.",
             "jalasat-tahdir", 0.67),
            ("رزم التذكير والمتابعة",
             "احصل على تذكيرات وقوائم متابعة بعد الموعد.",
             "ruzam-tadhkir-mutataba", 0.59),
        ],
        "immigration_support": [
            ("جلسة استراتيجية للهجرة",
             "ضع خطة مخصصة مع خبير معتمد للهجرة أو الإقامة.",
             "jalasat-istratijiya", 0.86),
            ("مراجعة الأهلية للإقامة",
             "تحقق من استيفاء شروط برنامج الإقامة المستهدف.",
             "murajaeat-ahlia", 0.8),
            ("قائمة جاهزية الملف",
             "تأكد من جاهزية ملفك قبل تقديمه.",
             "qaimat-jahiziat", 0.72),
        ],
        "financial_advice": [
            ("استشارة ضريبية",
             "جلسة مع متخصص لتوضيح التزاماتك الضريبية.",
             "istishara-daribiya", 0.81),
            ("مراجعة الامتثال المالي",
             "تأكد من مطابقة مستنداتك للمتطلبات التنظيمية.",
             "murajaeat-alaimtithal-almali", 0.75),
            ("ورشة تخطيط الميزانية",
             "ضع ميزانية مخصصة لتكاليف متطلباتك.",
             "warshat-takhtit-almizania", 0.64),
        ],
    },
}

DOCUMENT_TEMPLATES: dict[str, dict[str, str]] = {
    "en": {
        "summary": 'I noted the summary you provided: "{summary}". ',
        "document": "For the {document_type}, ",
        "request": "For your request, ",
        "plan": (
            "here is a structured plan based on your notes:\n"
            '1. Confirm the official guidance matches the information in "{snippet}".\n'
            "2. Gather supporting evidence and translations before completing the final form.\n"
            "3. Schedule a review with a specialist if anything remains unclear."
        ),
    },
    "fr": {
        "summary": "Résumé indiqué : « {summary} ». ",
        "document": "Concernant {document_type}, ",
        "request": "Pour votre demande, ",
        "plan": (
            "voici une approche recommandée basée sur vos éléments :\n"
            "1. Vérifiez que les consignes officielles correspondent aux informations "
            "« {snippet} ».\n"
            "2. Rassemblez les justificatifs et traductions avant de compléter le formulaire final.\n"
            "3. Prévoyez une relecture avec un spécialiste si nécessaire."
        ),
    },
    "ar": {
        "summary": 'ملخص مذكور: "{summary}". ',
        "document": "بالنسبة لـ {document_type}، ",
        "request": "بالنسبة لطلبك، ",
        "plan": (
            "إليك خطة مقترحة بناءً على المعلومات التالية:\n"
            '1. تأكد من أن التعليمات الرسمية تطابق ما ورد في "{snippet}".\n'
            "2. جهز المستندات المؤيدة والترجمات قبل إكمال النموذج النهائي.\n"
            "3. حدد جلسة مراجعة مع أخصائي إذا ظل أي شيء غير واضح."
        ),
    },
}

FOLLOW_UPS: dict[str, dict[str, tuple[str, ...]]] = {
    "en": {
        "generic": (
            "Would you like me to connect you with a specialist for a quick review?",
            "Should I assemble a checklist of required attachments?",
        ),
        "document_assistance": (
            "Do you need help translating or legalising any of the documents?",
            "Would a templated cover letter be useful for this submission?",
        ),
        "appointment_planning": (
            "Should I help you confirm the booking requirements?",
            "Do you need reminders before the appointment date?",
        ),
        "immigration_support": (
            "Would you like guidance on eligibility evidence for this application?",
            "Shall I create a timeline for your immigration milestones?",
        ),
        "financial_advice": (
            "Do you want to review the tax forms involved?",
            "Should I outline the typical supporting invoices or statements?",
        ),
    },
    "fr": {
        "generic": (
            "Souhaitez-vous qu’un spécialiste relise vos documents ?",
            "Dois-je préparer une checklist des pièces à joindre ?",
        ),
        "document_assistance": (
            "Avez-vous besoin d’aide pour des traductions certifiées ?",
            "Voulez-vous un modèle de lettre d’accompagnement ?",
        ),
        "appointment_planning": (
            "Dois-je vérifier les pièces exigées pour le rendez-vous ?",
            "Souhaitez-vous des rappels avant la date fixée ?",
        ),
        "immigration_support": (
            "Souhaitez-vous un point sur les justificatifs d’éligibilité ?",
            "Dois-je proposer un calendrier pour vos démarches ?",
        ),
        "financial_advice": (
            "Voulez-vous passer en revue les formulaires fiscaux concernés ?",
            "Dois-je lister les pièces comptables à préparer ?",
        ),
    },
    "ar": {
        "generic": (
            "هل ترغب في أن أوصلك بأخصائي لمراجعة سريعة؟",
            "هل أعد لك قائمة بالمرفقات المطلوبة؟",
        ),
        "document_assistance": (
            "هل تحتاج إلى مساعدة في الترجمة أو التصديق؟",
            "هل يناسبك الحصول على نموذج رسالة مرافقة؟",
        ),
        "appointment_planning": (
            "هل أساعدك في التأكد من متطلبات الحجز؟",
            "هل تحتاج إلى تذكيرات قبل موعدك؟",
        ),
        "immigration_support": (
            "هل ترغب في إرشادات حول إثبات الأهلية لهذا الطلب؟",
            "هل أعد لك جدولًا زمنيًا للخطوات الأساسية؟",
        ),
        "financial_advice": (
            "هل تريد مراجعة النماذج الضريبية المرتبطة؟",
            "هل أذكر لك المستندات المالية الداعمة عادةً؟",
        ),
    },
}
