# examples/quickstart.py
# Compare edgeR, DESeq2 and limma-voom on the 48 WT vs 48 Snf2 yeast replicates.
# Usage: python examples/quickstart.py WT.tsv Snf2.tsv [outdir]
import sys

import de_benchmark as deb

wt_path, mut_path = sys.argv[1], sys.argv[2]
outdir = sys.argv[3] if len(sys.argv) > 3 else "de_comparison"

# --- load both cohorts and drop genes without a single read ---
se = deb.load_cohorts({"WT": wt_path, "Mut": mut_path})
print("raw:", se.shape)
se = deb.drop_zero_rows(se)
print("filtered:", se.shape)
group = deb.get_group(se)

# --- one method at a time ---
edger_res = deb.run_de(se, group, "edger")
print(edger_res.table.head())

# --- all three, joined and compared ---
report = deb.compare_methods(se, group, deb.ComparisonConfig(levels=["WT", "Mut"]))
for conc in report.concordance:
    print(conc.summary())

# --- look at the genes the methods disagree on ---
print(report.discordant.head(20))
for gene in report.discordant["gene"].unique()[:3]:
    print(deb.gene_profile(se, gene, group).groupby("group")["count"].describe())

report.save(outdir)
