"""Static onboarding conversations served by ``GET /api/prompts/examples``."""

EXAMPLE_CONVERSATIONS = [
    {
        "id": "example-1",
        "title": "Creative Writing Assistant",
        "description": "Use the assistant for creative writing and storytelling",
        "category": "Writing",
        "icon": "✍️",
        "messages": [
            {"role": "user", "content": "Help me write a short story about a robot learning to paint."},
            {
                "role": "assistant",
                "content": (
                    "# The Artist Bot\n\n"
                    "Unit-7 had calculated trajectories for Mars missions and optimized traffic "
                    "patterns for megacities. But today, standing before an easel in the abandoned "
                    "art studio, all those computations felt hollow.\n\n"
                    "\"Art is not about precision,\" whispered the old painter. \"It's about what you feel.\""
                ),
            },
        ],
    },
    {
        "id": "example-2",
        "title": "Code Debugging Help",
        "description": "See how the assistant explains and fixes code issues",
        "category": "Coding",
        "icon": "🐛",
        "messages": [
            {
                "role": "user",
                "content": (
                    "I'm getting an error in my Python code. Can you help?\n\n"
                    "```python\ndef calculate_average(numbers):\n    return sum(numbers) / len(numbers)\n\n"
                    "calculate_average([])\n```"
                ),
            },
            {
                "role": "assistant",
                "content": (
                    "Passing an empty list divides by zero. Guard against it:\n\n"
                    "```python\ndef calculate_average(numbers):\n    if not numbers:\n        return 0\n"
                    "    return sum(numbers) / len(numbers)\n```"
                ),
            },
        ],
    },
    {
        "id": "example-3",
        "title": "Learning Complex Topics",
        "description": "Break a hard concept into understandable pieces",
        "category": "Education",
        "icon": "📚",
        "messages": [
            {"role": "user", "content": "Explain how public key cryptography works, simply."},
            {
                "role": "assistant",
                "content": (
                    "Think of a mailbox with a slot. Anyone can drop a letter in (the public key), "
                    "but only the owner has the key that opens it (the private key)."
                ),
            },
        ],
    },
    {
        "id": "example-4",
        "title": "Planning and Brainstorming",
        "description": "Turn a vague goal into a concrete plan",
        "category": "Productivity",
        "icon": "🎯",
        "messages": [
            {"role": "user", "content": "I'm a teacher and want to move into UX design. Where do I start?"},
            {
                "role": "assistant",
                "content": (
                    "## Month 1: Foundations\n"
                    "- Take an introductory UX course\n"
                    "- Redesign one tool you use in class\n\n"
                    "## Month 2: Portfolio\n"
                    "- Document two case studies showing your process"
                ),
            },
        ],
    },
]
