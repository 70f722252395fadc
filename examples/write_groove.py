#!/usr/bin/env python3
"""
Example: Writing a Drum Groove.

This demonstrates the score model end to end - placing notes into voices,
watching the bar keep every voice gap-free, and changing a time signature
so that notes spill over into a new bar.

Usage:
    python examples/write_groove.py

This example shows:
1. Creating a score and adding hi-hat and snare/bass voices
2. How intervals are resized and filled with rests
3. Stem directions chosen between two voices
4. Changing 4/4 to 3/4 and the overflow bar it creates
5. Saving the score as YAML
"""

from pathlib import Path

from chuk_mcp_drumscore.scores import ScoreManager, validate_score

HI_HAT = 11
SNARE = 7
BASS_DRUM = 3


def print_bar(score, bar_nr: int) -> None:
    bar = score.get_bar(bar_nr)
    print(f"   Bar {bar.bar_nr} ({bar.time_signature})")
    for voice_num, voice in bar.voices.items():
        direction = voice.stem_direction.value if voice.stem_direction else "per group"
        cells = []
        for interval in voice.intervals:
            notes = ",".join(str(h) for h in sorted(interval.note_heads)) or "rest"
            cells.append(f"{interval.length}[{notes}]")
        print(f"     voice {voice_num} (stems {direction}): " + " | ".join(cells))


async def main() -> None:
    """Build a one-bar groove and reshape it."""
    output_dir = Path(__file__).parent / "output"

    print("CHUK Drum Score Demo")
    print("=" * 50)
    print()

    manager = ScoreManager(output_dir)

    print("1. Creating score...")
    score = await manager.create("basic-rock", bars=1, time_signature="4/4")
    print_bar(score, 1)
    print()

    print("2. Eighth-note hi-hats in voice 1...")
    for idx in range(8):
        await manager.add_note("basic-rock", 1, 1, "eighth", HI_HAT, idx, "cross")
    print_bar(score, 1)
    print()

    print("3. Bass drum and snare in voice 2...")
    await manager.add_note("basic-rock", 1, 2, "quarter", BASS_DRUM, 0)
    voice = score.get_bar(1).get_voice(2)
    await manager.add_note("basic-rock", 1, 2, "quarter", SNARE, 1)
    await manager.add_note("basic-rock", 1, 2, "quarter", BASS_DRUM, 2)
    await manager.add_note("basic-rock", 1, 2, "quarter", SNARE, len(voice) - 1)
    print_bar(score, 1)
    print()

    print("4. Changing bar 1 to 3/4...")
    score, inserted = await manager.change_time_signature("basic-rock", 1, "3/4")
    print(f"   Inserted {inserted} bar(s) for overflowing notes")
    for bar in score.bars:
        print_bar(score, bar.bar_nr)
    print()

    print("5. Validating and saving...")
    print(f"   {validate_score(score)}")
    path = await manager.save(score)
    print(f"   Saved to {path}")


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
