ANSWER_WORDS = [
    'pearl', 'ocean', 'coral', 'shell', 'tides', 'waves', 'beach', 'shore', 'reefs', 'kelps',
    'crane', 'slate', 'trace', 'crate', 'stare', 'heart', 'plant', 'brick', 'chair', 'flame',
    'ghost', 'house', 'light', 'month', 'night', 'place', 'river', 'stone', 'table', 'water',
    'world', 'youth', 'apple', 'bread', 'cloud', 'dance', 'earth', 'field', 'glass', 'horse',
    'juice', 'knife', 'lemon', 'money', 'nurse', 'olive', 'piano', 'queen', 'radio', 'sugar',
    'tiger', 'uncle', 'voice', 'whale', 'yacht', 'zebra', 'angle', 'blaze', 'charm', 'drift',
    'eagle', 'frost', 'grape', 'honey', 'ivory', 'jolly', 'karma', 'lunar', 'maple', 'noble',
    'orbit', 'prism', 'quilt', 'raven', 'storm', 'thorn', 'umbra', 'vivid', 'wheat', 'xenon',
    'yield', 'zesty', 'amber', 'bloom', 'cider', 'dunes', 'ember', 'flint', 'gleam', 'haven',
    'inlet', 'jewel', 'knoll', 'latch', 'marsh', 'nymph', 'oasis', 'plume', 'quest', 'ridge',
    'spire', 'trout', 'unity', 'vault', 'wreck', 'young', 'abode', 'berry', 'cabin', 'delta',
    'epoch', 'fable', 'gusto', 'hatch', 'index', 'joker', 'kneel', 'ledge', 'mirth', 'nexus',
    'otter', 'pixel', 'quota', 'rumba', 'scarf', 'tulip', 'ultra', 'vigor', 'woven', 'zonal',
    'baker', 'candy', 'diver', 'event', 'feast', 'giant', 'hover', 'irony', 'jumbo', 'koala',
    'lodge', 'mango', 'nerve', 'onset', 'perch', 'quart', 'rally', 'sheep', 'tango', 'usher',
    'verse', 'waltz', 'alarm', 'brave', 'crisp', 'dream', 'equal', 'fresh', 'grand', 'hinge',
    'inner', 'joint', 'label', 'minor', 'north', 'outer', 'pilot', 'quiet', 'royal', 'salty',
    'tower', 'urban', 'valid', 'wagon', 'adore', 'bench', 'clerk', 'depth', 'elbow', 'fairy',
]

EXTRA_GUESSES = [
    'about', 'above', 'actor', 'adult', 'after', 'again', 'agent', 'agree', 'ahead', 'alive',
    'allow', 'alone', 'along', 'among', 'arise', 'audio', 'avoid', 'award', 'aware', 'badly',
    'basic', 'begin', 'being', 'below', 'birth', 'black', 'blame', 'blind', 'block', 'blood',
    'board', 'boost', 'brain', 'brand', 'break', 'brief', 'bring', 'broad', 'brown', 'build',
    'buyer', 'cable', 'carry', 'catch', 'cause', 'chain', 'cheap', 'check', 'chest', 'chief',
    'child', 'civil', 'claim', 'class', 'clean', 'clear', 'climb', 'clock', 'close', 'coach',
    'count', 'court', 'cover', 'craft', 'crash', 'cream', 'crime', 'cross', 'crowd', 'curve',
    'cycle', 'daily', 'death', 'doubt', 'draft', 'drama', 'drink', 'drive', 'early', 'enemy',
    'enjoy', 'enter', 'entry', 'error', 'exist', 'extra', 'faith', 'false', 'fault', 'fiber',
    'fifth', 'fight', 'final', 'first', 'floor', 'focus', 'force', 'frame', 'front', 'fruit',
    'fully', 'funny', 'given', 'grass', 'great', 'green', 'gross', 'group', 'guard', 'guess',
    'guest', 'guide', 'happy', 'heavy', 'human', 'ideal', 'image', 'issue', 'judge', 'known',
    'large', 'laser', 'later', 'laugh', 'layer', 'learn', 'lease', 'least', 'leave', 'legal',
    'level', 'limit', 'local', 'logic', 'loose', 'lower', 'lucky', 'lunch', 'major', 'maker',
    'march', 'match', 'maybe', 'mayor', 'meant', 'media', 'metal', 'might', 'model', 'moral',
    'motor', 'mount', 'mouse', 'mouth', 'movie', 'music', 'needs', 'never', 'newly', 'noise',
    'novel', 'occur', 'offer', 'often', 'order', 'other', 'owner', 'paint', 'panel', 'paper',
    'party', 'peace', 'phase', 'phone', 'photo', 'piece', 'pitch', 'plain', 'plane', 'plate',
    'point', 'pound', 'power', 'press', 'price', 'pride', 'prime', 'print', 'prior', 'prize',
    'proof', 'proud', 'prove', 'quick', 'quite', 'raise', 'range', 'rapid', 'ratio', 'reach',
    'ready', 'refer', 'right', 'rival', 'rough', 'round', 'route', 'rural', 'scale', 'scene',
    'scope', 'score', 'sense', 'serve', 'seven', 'shall', 'shape', 'share', 'sharp', 'sheet',
    'shelf', 'shift', 'shirt', 'shock', 'shoot', 'short', 'sight', 'since', 'sixth', 'skill',
    'sleep', 'small', 'smart', 'smile', 'smith', 'smoke', 'solid', 'solve', 'sorry', 'sound',
    'south', 'space', 'spare', 'speak', 'speed', 'spend', 'spent', 'split', 'sport', 'staff',
    'stage', 'stake', 'stand', 'start', 'state', 'steam', 'steel', 'stick', 'still', 'stock',
    'store', 'story', 'strip', 'stuck', 'study', 'stuff', 'style', 'sweet', 'taken', 'taste',
    'teach', 'thank', 'theme', 'there', 'thick', 'thing', 'think', 'third', 'those', 'three',
    'throw', 'tight', 'times', 'tired', 'title', 'today', 'topic', 'total', 'touch', 'tough',
    'track', 'trade', 'train', 'treat', 'trend', 'trial', 'tried', 'truck', 'truly', 'trust',
    'truth', 'twice', 'under', 'union', 'until', 'upper', 'upset', 'usage', 'usual', 'value',
    'video', 'visit', 'vital', 'waste', 'watch', 'wheel', 'where', 'which', 'while', 'white',
    'whole', 'whose', 'woman', 'worry', 'worse', 'worst', 'worth', 'would', 'wound', 'write',
    'wrong', 'wrote', 'arose', 'adieu', 'roate', 'soare', 'salet', 'tares', 'lares', 'raise',
]

VALID_GUESSES = frozenset(ANSWER_WORDS) | frozenset(EXTRA_GUESSES)


def is_valid_guess(word: str) -> bool:
    return word in VALID_GUESSES
