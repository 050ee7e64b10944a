"""Static scenario catalog.

Records are immutable and loaded once at import; nothing in the server
mutates them.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

MCQ = 'mcq'
FREE_TEXT = 'short'


@dataclass(frozen=True)
class ScenarioRecord:
    id: int
    title: str
    prompt: str
    task: str
    kind: str
    options: Tuple[str, ...] = ()
    time_limit: int = 60

    @property
    def is_multiple_choice(self) -> bool:
        return self.kind == MCQ

    def resolve_option(self, selected: str) -> Optional[str]:
        """Match a full option string or its letter label ("B")."""
        for option in self.options:
            if selected == option:
                return option
        label = selected.strip().rstrip('.').upper()
        for option in self.options:
            if option.split('.', 1)[0].strip().upper() == label:
                return option
        return None

    def to_dict(self):
        data = {
            'id': self.id,
            'title': self.title,
            'scenario': self.prompt,
            'task': self.task,
            'type': self.kind,
            'timeLimit': self.time_limit,
        }
        if self.is_multiple_choice:
            data['options'] = list(self.options)
        return data


def _mcq(id, title, prompt, task, *options):
    return ScenarioRecord(id=id, title=title, prompt=prompt, task=task, kind=MCQ, options=tuple(options))


def _short(id, title, prompt, task):
    return ScenarioRecord(id=id, title=title, prompt=prompt, task=task, kind=FREE_TEXT)


SCENARIOS: Tuple[ScenarioRecord, ...] = (
    _mcq(1, "Bear or Bull (Market Mood Match)",
         "Tesla Misses Earnings but Announces India Entry - Revenue down 8%, but Elon tweets about opening a gigafactory in Gujarat.",
         "Pick the correct market sentiment & justify.",
         "A. Bull – Investors focus on India growth potential.",
         "B. Bear – Poor earnings outweigh expansion news.",
         "C. Flat – Both events balance out.",
         "D. Volatile – Market swings before settling."),
    _mcq(2, "Inflation (Crisis Control)",
         "Inflation at 9.2%. Public outrage is rising. You head the RBI task force.",
         "Pick a policy & defend it.",
         "A. Raise interest rates by 1.5%",
         "B. Ration food & fuel",
         "C. Stop all new govt spending for 6 months",
         "D. Ask corporates to freeze price hikes voluntarily"),
    _mcq(3, "Pricing (Bathroom Economics)",
         "Toilet Paper with Rizz™ - scented, eco-friendly, QR jokes.",
         "Pick best price based on psychology, segmentation, & margins.",
         "A. ₹29 – Mass market",
         "B. ₹49 – Mid-premium",
         "C. ₹99 – Luxury \"Bathroom Experience\""),
    _mcq(4, "Disappearing Brand (Brand Mystery)",
         "SplashPop Soda vanished in 2023.",
         "Pick the most likely cause.",
         "A. TikTok toothpaste mix challenge went wrong",
         "B. Launched \"Shrimp Punch\" flavor",
         "C. Glow-in-dark bottle melted in sun"),
    _mcq(5, "Opportunity Cost (Career Crossroads)",
         "₹18 LPA Bain offer (stable, fast track to IIM) vs ₹16 LPA SpaceX India (risky, 1st 20 employees).",
         "Explain what you gain AND give up.",
         "A. Bain – Prestige, network, stability",
         "B. SpaceX – Innovation, risk, pioneering role"),
    _mcq(6, "Tagline Twist (Decode the Hype)",
         "\"Organized chaos you volunteered for.\"",
         "Match the tagline to the platform.",
         "A. Reddit",
         "B. Twitter (X)",
         "C. WhatsApp group chats",
         "D. Pinterest"),
    _mcq(7, "Types of Market (Market Match-Up)",
         "Visa & Mastercard in India despite UPI dominance.",
         "Identify the market structure.",
         "A. Duopoly",
         "B. Monopolistic Competition",
         "C. Natural Oligopoly",
         "D. Regulated Monopoly"),
    _short(8, "The Bedtime Lie (Self-Truth Check)",
           "\"Lie down for 5 mins\" → wake up 4 hrs later.",
           "Decide - lie or truth? Justify logically."),
    _short(9, "The 'Do Not Enter' Door (Rule or Trap?)",
           "Sign says \"Do Not Enter,\" behind it is free dessert.",
           "Entering - break rule or follow trap? Justify."),
    _mcq(10, "Budget Breakdown (Budget or Bust)",
         "Rick & Morty's Multiverse Hackathon - ₹1,00,000 left after Rick blows half budget.",
         "Pick & justify your budget allocation.",
         "A. WiFi (30k), Alien snacks (40k), Stage (30k)",
         "B. Portal insurance (50k), Translator drones (20k), ID cards (30k)",
         "C. Livestream tech (25k), Wormhole security (35k), PR (40k)",
         "D. Custom chaos config"),
    _mcq(11, "Corporate Ethics (Corporate Compass)",
         "Your company discovers a product defect that could cause minor injuries. Recall costs ₹50 crores, legal costs if discovered later could be ₹200 crores.",
         "Pick your ethical stance & justify.",
         "A. Immediate recall – protect customers first",
         "B. Silent fix in next batch – minimize costs",
         "C. Legal disclosure – let customers decide",
         "D. Wait for complaints – react if needed"),
    _mcq(12, "Society Ethics (Social Morality)",
         "A whistleblower reveals government corruption but breaks national security laws in the process.",
         "Choose & defend your ethical stance.",
         "A. Support whistleblower – public interest first",
         "B. Prosecute for law breaking – rules matter",
         "C. Conditional immunity – balanced approach",
         "D. Case-by-case evaluation – context matters"),
    _short(13, "The Restaurant Rule (Logic Loop)",
           "Restaurant sign: \"We serve everyone who doesn't follow rules.\" You break one rule.",
           "Are you served? Explain the paradox."),
    _mcq(14, "Turn Trash into Treasure (From Worst to Wow)",
         "Reversible socks with pockets.",
         "Transform this \"worst\" product into something amazing.",
         "A. \"Sockrets\" snack stash",
         "B. Airport gum/cash holder",
         "C. ADHD-friendly fidget fashion",
         "D. Survival kit drop"),
    _mcq(15, "Government Ethics (Policy Morality)",
         "Pandemic lockdown vs economic collapse. 10,000 jobs lost daily vs 500 lives lost daily.",
         "Balance legality, trust, and long-term impact.",
         "A. Strict lockdown – lives over economy",
         "B. Open economy – livelihoods matter",
         "C. Phased reopening – balanced approach",
         "D. Local decisions – context-based policy"),
    _mcq(16, "Packaging Problem (Product Survival)",
         "Perfume leak crisis causing ₹2 crore monthly losses.",
         "Pick fix & justify cost-benefit.",
         "A. Heavier glass bottles - more freight cost",
         "B. Tamper-proof wrap - melts in heat",
         "C. Mini bottles - triple packaging cost",
         "D. Industrial-grade threading - 3-week delay",
         "E. Fill locally - reduces scent life"),
    _mcq(17, "Mystery Product Combination (Product Mashup)",
         "The Stationery Stunt - paperclip, torn ruler, crayon stub.",
         "Create a viable product from these components.",
         "A. \"I-Measured-Wrong\" Ruler",
         "B. Multi-use Crayon Clip",
         "C. Stress Cracker Pack"),
    _short(18, "Investigation Type Thing (HR Sleuth)",
           "Office coffee machine money disappears daily. Security shows 3 people near it: intern (always broke), manager (hates coffee), cleaner (night shift).",
           "Solve using logic + given clues."),
    _short(19, "The Perfect Team Combo (HR Strategist)",
           "Build 5-person team: Genius (arrogant), Veteran (slow adopter), Rookie (eager), Diplomat (conflict-averse), Maverick (rule-breaker).",
           "Balance skill, diversity, & conflict control."),
    _short(20, "Reverse Auction (Strategy Meets Originality)",
           "Founder's Survival - with ₹100, list cheapest unique business-starting item.",
           "Lowest unique bid wins. Think strategy + originality."),
    _mcq(21, "Burning Building (Marketing Rescue)",
         "Warehouse fire - you can save only ONE category of inventory.",
         "Pick what to save for business survival.",
         "A. Viral product stock",
         "B. Raw materials (6 months)",
         "C. Discontinued products",
         "D. Celebrity collab stock",
         "E. R&D equipment"),
    _mcq(22, "Risk It! (The Hustler's Bet)",
         "NFT-based food delivery startup dying. ₹5 lakhs left, 2 months runway.",
         "Pick your pivot strategy.",
         "A. B2B food tokens for corporates",
         "B. \"Pay-to-Cook\" app",
         "C. Meme page partnership",
         "D. Kill brand → dating app"),
    _short(23, "Trade Game (Survival Markets)",
           "Crisis countries trade: Oil (Saudi), Tech (Japan), Food (India), Military (USA). You're India facing drought.",
           "Trade resources to survive. Justify strategy."),
    _mcq(24, "CFO Challenge (CFO's Last Stand)",
         "CloneCorp board wants to cut \"empathy modules\" from AI products to boost profits 40%.",
         "You're the CFO. Choose your response.",
         "A. Resign",
         "B. Stay silent + exit strategy",
         "C. Leak to media",
         "D. Rebrand sociopaths as \"efficiency experts\""),
    _short(25, "Monopoly Auction (Final Bidding War)",
           "Teams bid fake money on surprise mystery boxes - may help or sabotage your final score.",
           "Bid strategically on unknown items. High risk, high reward."),
)

_BY_ID: Dict[int, ScenarioRecord] = {s.id: s for s in SCENARIOS}


def get_scenario(scenario_id: int) -> Optional[ScenarioRecord]:
    return _BY_ID.get(scenario_id)


def all_scenario_ids():
    return [s.id for s in SCENARIOS]
