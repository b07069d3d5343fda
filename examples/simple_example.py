#!/usr/bin/env python3
"""Simple example of using ASCIIMath to MathML"""

import json

from asciimath_mathml import AsciiMathConverter, MathMLOptions

# Create converter
converter = AsciiMathConverter()

# A few formulas in ASCIIMath
formulas = [
    "E = mc^2",
    "x = (-b+-sqrt(b^2-4ac))/(2a)",
    "sum_(n=0)^oo 1/n^2 = pi^2/6",
    "((a,b),(c,d))",
]

# Convert them
print("Converting formulas...")
results = [converter.process(formula, MathMLOptions(display="block")) for formula in formulas]

# Show results
for i, result in enumerate(results, 1):
    print(f"\n{i}. {result.asciimath}")
    print(f"   {result.mathml}")
    print(f"   Valid: {result.is_valid}")

# Save to file
with open("my_formulas.json", "w", encoding="utf-8") as f:
    json.dump([result.to_dict() for result in results], f, indent=2)
print("\nResults saved to my_formulas.json")
