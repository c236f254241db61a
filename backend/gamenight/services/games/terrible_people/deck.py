"""Card text for Terrible People. Ids are stable so hands survive a reload."""

_BLACK = [
    ("What ruined the family reunion this year?", 1),
    ("My therapist says I need to stop ____.", 1),
    ("The secret ingredient in grandma's casserole is ____.", 1),
    ("What's that smell?", 1),
    ("Next on reality TV: Survivor, ____ edition.", 1),
    ("I never truly understood ____ until I experienced ____.", 2),
    ("What did I bring back from the company retreat?", 1),
    ("The airline lost my luggage but found ____.", 1),
    ("What's my anti-drug?", 1),
    ("In the future, historians will agree that ____ marked the decline of civilisation.", 1),
    ("Step one: ____. Step two: ____. Step three: profit.", 2),
    ("What gets better with age?", 1),
    ("The neighbours called the police because of ____.", 1),
    ("What will always get you a second date?", 1),
    ("Coming soon to a theatre near you: ____, the musical.", 1),
    ("My new year's resolution: less ____, more ____.", 2),
    ("What is the real reason the dinosaurs died out?", 1),
    ("I got banned from the library for ____.", 1),
    ("What's the worst thing to hear from the pilot?", 1),
    ("The wedding was going fine until ____.", 1),
    ("What keeps me up at night?", 1),
    ("The only thing scarier than ____ is ____.", 2),
    ("What did the fortune cookie say?", 1),
    ("Dear diary, today I discovered ____.", 1),
    ("What is hiding in the office fridge?", 1),
    ("Mom, I can explain. It was ____.", 1),
    ("Science has finally explained ____.", 1),
    ("The group chat went silent after someone posted ____.", 1),
    ("What's the one thing you shouldn't bring to a job interview?", 1),
    ("Tonight's special: ____ with a side of ____.", 2),
]

_WHITE = [
    "A suspiciously damp sock.",
    "Interpretive dance.",
    "My browser history.",
    "An emotional support iguana.",
    "Aggressive small talk.",
    "A lukewarm bowl of soup.",
    "Forgetting the birthday of a close friend.",
    "Crying in the cereal aisle.",
    "A pyramid scheme with good intentions.",
    "Unsolicited advice.",
    "The last slice of pizza.",
    "Passive-aggressive sticky notes.",
    "A haunted spreadsheet.",
    "Replying all.",
    "A motivational speaker who has given up.",
    "Spontaneous yodelling.",
    "An unread terms of service agreement.",
    "Mystery meat.",
    "A raccoon in a trench coat.",
    "Tax season.",
    "Overconfident karaoke.",
    "Pineapple on everything.",
    "A 47-step skincare routine.",
    "Mildly threatening wind chimes.",
    "The Wi-Fi password.",
    "Existential dread.",
    "Assembling flat-pack furniture without instructions.",
    "A clown's day off.",
    "Competitive napping.",
    "The group project slacker.",
    "A sourdough starter named Kevin.",
    "Loudly chewing ice.",
    "Grandpa's conspiracy theories.",
    "An awkward high five.",
    "Stepping on a plug barefoot.",
    "A very confident goose.",
    "Too many browser tabs.",
    "A surprise performance review.",
    "Cold pizza for breakfast.",
    "A mime having a breakdown.",
    "Socks with sandals.",
    "Doing the worm at a funeral.",
    "A decorative fish that judges you.",
    "Eating cereal with a fork.",
    "Snoring like a chainsaw.",
    "The 3 a.m. fridge raid.",
    "Spoiling the ending.",
    "An accidental video call.",
    "A gym membership I never use.",
    "The smell of burnt popcorn.",
    "Hiding from the neighbours.",
    "An overly friendly dentist.",
    "Microwaving fish at work.",
    "A llama with a grudge.",
    "Waving back at someone who wasn't waving at me.",
    "Glitter. Everywhere.",
    "A suspicious amount of cheese.",
    "Two raccoons pretending to be a dog.",
    "The silent treatment.",
    "Bringing a kazoo to a business meeting.",
    "Uncomfortably long eye contact.",
    "A truly magnificent moustache.",
    "Parallel parking in front of an audience.",
    "An inflatable flamingo.",
    "Getting lost in IKEA.",
    "A sneeze during a silent moment.",
    "Dad jokes.",
    "Pretending to know wine.",
    "A very long voicemail.",
    "Explaining the internet to a time traveller.",
    "Eating the decorative fruit.",
    "A cat that demands rent.",
    "Ghosting the dentist.",
    "An extremely loud chewing gum.",
    "A ukulele cover of a metal song.",
    "Falling asleep during a horror movie.",
    "The office birthday cake.",
    "A parking ticket from the future.",
    "Sleeping through three alarms.",
    "An unnecessary amount of bubble wrap.",
    "Arguing with a self-checkout machine.",
    "A disappointing magician.",
    "Dramatic slow-motion walking.",
    "Knitting a sweater for a snake.",
    "A pigeon with ambition.",
    "Winning an argument in the shower.",
    "Cancelling plans and feeling great about it.",
    "A sandwich with too many layers.",
    "Saying 'you too' to the waiter.",
    "A rubber duck that knows too much.",
]

BLACK_CARDS = [
    {'id': f"b{i + 1}", 'text': text, 'pick': pick}
    for i, (text, pick) in enumerate(_BLACK)
]

WHITE_CARDS = [
    {'id': f"w{i + 1}", 'text': text}
    for i, text in enumerate(_WHITE)
]
