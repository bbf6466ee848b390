"""
Phrase variant banks for dealer emails.

Each slot has a few interchangeable wordings; the composer picks one per slot
uniformly at random. Variants in a bank must convey the same information and
use the same named fields, so swapping one for another changes the wording of
an email but never what it says.
"""

# --- Outreach (first contact) ---

OUTREACH_SUBJECTS: dict[str, list[str]] = {
    "cash": [
        "Looking for a {vehicle} near {zip_code}",
        "{vehicle} buyer in {zip_code} - pricing question",
        "Question about {vehicle} availability",
    ],
    "lease": [
        "Lease inquiry: {vehicle}",
        "Monthly lease pricing on {vehicle}",
        "Lease availability for {vehicle}",
    ],
    "finance": [
        "Finance options for {vehicle}",
        "Finance details for {vehicle}",
        "Finance availability for {vehicle}",
    ],
}

OUTREACH_INTROS: list[str] = [
    "Hi there,\n\nMy name is {name} and I live in the {zip_code} area. "
    "I'm currently shopping for a {vehicle_full}.",
    "Hi,\n\nI'm {name} in {zip_code}. I'm seriously looking at a {vehicle_full} "
    "and wanted to see what you might have available.",
    "Hello,\n\nI'm {name} from the {zip_code} area. I'm in the market for a {vehicle_full}, "
    "and I'm reaching out directly to check on inventory and realistic pricing.",
]

INTERIOR_WORDS: dict[str, str] = {
    "light": "lighter interior",
    "dark": "darker interior",
}

INTERIOR_SENTENCES: list[str] = [
    " I'd prefer a {interior} if possible.",
    " A {interior} would be my first choice.",
    " If you have options, I'm leaning toward a {interior}.",
]

MUST_HAVE_SENTENCES: list[str] = [
    " A few features I really care about are: {items}.",
    " My must-have features include: {items}.",
    " I'm trying to make sure it has: {items}.",
]

DEALBREAKER_SENTENCES: list[str] = [
    " I'm trying to avoid: {items}.",
    " I'm not interested in anything with: {items}.",
    " I'd rather stay away from: {items}.",
]

TIMELINE_SENTENCES: list[str] = [
    "\n\nI'm hoping to do something within {timeline}.",
    "\n\nIdeally, I'd like to wrap this up within {timeline}.",
    "\n\nMy timeline is {timeline}, but I'm flexible if needed.",
]

PRICE_PARAGRAPHS: dict[str, list[str]] = {
    "cash": [
        "\n\nI'm trying to stay around {target} out the door, and I can stretch up to "
        "about {max_price} for the right vehicle.",
        "\n\nPrice-wise, my goal is roughly {target} out the door, with an upper limit near {max_price}.",
        "\n\nIn terms of budget, I'm targeting about {target} OTD and I'd like not to go "
        "past roughly {max_price}.",
    ],
    "lease": [
        "\n\nI'm hoping for {payment_goal} with as little due at signing as possible, "
        "on a {months}-month lease at {miles} miles/year.{down_sentence}",
        "\n\nFor the lease, I'm aiming for {payment_goal} over {months} months with "
        "{miles} miles/year, keeping due at signing low.{down_sentence}",
        "\n\nBudget-wise, I'd like {payment_goal} on a {months}-month, {miles} miles/year "
        "lease with minimal due at signing.{down_sentence}",
    ],
    "finance": [
        "\n\nI'm looking to finance for about {months} months with {payment_goal}, "
        "ideally at a low APR.{down_sentence}",
        "\n\nFor financing, I'm aiming for {payment_goal} over roughly {months} months "
        "at a competitive APR.{down_sentence}",
        "\n\nI'd like to finance over {months} months, with {payment_goal} and the "
        "lowest APR you can offer.{down_sentence}",
    ],
}

LEASE_PAYMENT_GOAL = "a payment around {payment}/month"
LEASE_PAYMENT_GOAL_OPEN = "the lowest monthly payment I can get"
FINANCE_PAYMENT_GOAL = "a monthly payment around {payment}"
FINANCE_PAYMENT_GOAL_OPEN = "a manageable monthly payment"
DOWN_PAYMENT_SENTENCE = " I can put about {down} down."
MINIMAL_DOWN_SENTENCE = " I'd like to keep the down payment minimal."

ASK_PARAGRAPHS: dict[str, list[str]] = {
    "cash": [
        "\n\nDo you currently have anything in stock that's a close match, and what would a "
        "realistic out-the-door number look like (including dealer fees, but before tax is "
        "fine if that's easier)?",
        "\n\nCould you let me know if you have something that fits this description and what "
        "your best all-in (or close) number would be?",
        "\n\nIf you have something that fits, I'd appreciate a straightforward quote with all "
        "dealer fees included so I can compare it apples-to-apples.",
    ],
    "lease": [
        "\n\nCould you provide a detailed lease quote, including monthly payment, due at "
        "signing, term, mileage, and any fees?",
        "\n\nDo you have any lease specials for this vehicle? I'd like to know the monthly "
        "payment, term, mileage, and any fees or add-ons.",
        "\n\nIf you have something that fits, I'd appreciate a lease worksheet with all the details.",
    ],
    "finance": [
        "\n\nCould you provide a detailed finance quote, including APR, term, down payment, "
        "and monthly payment?",
        "\n\nDo you have any financing options available for this vehicle? I'd like to know the "
        "APR, term, down payment, and all fees.",
        "\n\nIf you have something that fits, I'd appreciate a straightforward finance quote "
        "with all details included.",
    ],
}

OUTREACH_SIGN_OFFS: list[str] = [
    "\n\nThanks for your time,\n{name}",
    "\n\nThanks in advance for any info you can share,\n{name}",
    "\n\nI appreciate your help,\n{name}",
]

# --- Follow-up (reply to a dealer offer) ---

GREETINGS: list[str] = ["Hi there,", "Hello,", "Hi,"]

ACCEPT_SUBJECTS: list[str] = [
    "Re: {vehicle} - ready to move forward",
    "Re: {vehicle} - let's wrap it up",
    "Re: {vehicle} - looks good to me",
]
ACCEPT_CHECKS: list[str] = [
    "Before I commit, can you confirm there aren't any surprise fees or mandatory add-ons?",
    "Just want to double-check there's nothing extra beyond what you listed.",
    "Can you confirm that number has no additional fees or required add-ons on top of it?",
]
ACCEPT_CLOSERS: list[str] = [
    "If that all checks out, I'm ready to move forward.",
    "If everything is as described, I'm good to go.",
    "Once that's confirmed, I'm happy to set up a time to finish the paperwork.",
]
ACCEPT_SIGN_OFFS: list[str] = ["Thanks!", "Thanks so much,", "Appreciate it,"]

COUNTER_SUBJECTS: list[str] = [
    "Re: {vehicle} - can we get closer?",
    "Re: {vehicle} - price is a bit high",
    "Re: {vehicle} - let's negotiate",
]
COUNTER_OPENERS: list[str] = [
    "Thanks for the quote on the {vehicle}.",
    "I appreciate you sending over the numbers on the {vehicle}.",
    "Thanks for getting back to me about the {vehicle}.",
]
NEGOTIATION_LINES: list[str] = [
    "Is there any flexibility on the price or terms?",
    "If you can sharpen the numbers a bit, I'd be ready to move quickly.",
    "Let me know if there's any room to work together on this.",
    "If you can get closer to my target, I'd be happy to discuss next steps.",
]
COUNTER_SIGN_OFFS: list[str] = ["Thanks again!", "Thanks,", "Talk soon,"]

CLARIFY_SUBJECTS: list[str] = [
    "Re: {vehicle} - can you clarify the total?",
    "Re: {vehicle} - need a breakdown",
    "Re: {vehicle} - what's the real OTD?",
]
CLARIFY_CLOSERS: list[str] = [
    "That'll help me compare apples-to-apples.",
    "Just want to see the full picture before deciding.",
    "Once I have that, I can get back to you quickly.",
]
CLARIFY_SIGN_OFFS: list[str] = ["Thanks!", "Thank you,", "Thanks in advance,"]

DECLINE_SUBJECTS: list[str] = [
    "Re: {vehicle} - not quite a fit",
    "Re: {vehicle} - going to pass for now",
    "Re: {vehicle} - thanks for the info",
]
DECLINE_LINES: list[str] = [
    "After looking it over, I'm going to pass for now because it doesn't quite line up "
    "with what I'm trying to do.",
    "I appreciate the info, but it's not quite what I'm after.",
    "I'm going to hold off for now, but thanks for the details.",
]
DECLINE_SIGN_OFFS: list[str] = ["Best,", "All the best,", "Thanks again,"]
